# Messages Feature
