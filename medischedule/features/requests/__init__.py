# Surgery Requests Feature
