# Schedule Adjustment Advisory Feature
