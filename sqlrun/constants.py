DEFAULT_DELIMITER = ";"
COMMENT_PREFIX = "--"

# Progress line is printed after every N processed statements
PROGRESS_EVERY = 10

CONFIG_SUFFIXES = (".yml", ".yaml", ".toml")
