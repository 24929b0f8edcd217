# Resources Feature
