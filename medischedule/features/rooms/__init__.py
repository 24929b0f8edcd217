# Operating Rooms Feature
