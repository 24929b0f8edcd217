# Authentication Feature
# Tokens come from the external authentication provider; this feature only
# verifies them and resolves the acting user.
