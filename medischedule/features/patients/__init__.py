# Patient Management Feature
