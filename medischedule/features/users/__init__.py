# Users & Staff Feature
