from typing import TypedDict

COMMENT_MARKER = "#"
FIELD_DELIMITER = ","
ERROR_MARKER = "# [ERROR] "

COMMAND_FILE_PATTERN = "*.csv"
PROCESSED_SUFFIX = ".processed"
PARTIALLY_PROCESSED_SUFFIX = ".partially_processed"

CATALOG_STRUCTURE_VERSION = 1
DATE_FORMAT = "%Y-%m-%d"

# Reserved id ranges.
LOWEST_BUILTIN_ID = 1
HIGHEST_BUILTIN_ID = 5
FAKE_DEVELOPER_AUTHOR_ID = 101
LOWEST_LOCAL_MOD_ID = 1001
HIGHEST_LOCAL_MOD_ID = 9999
LOWEST_GROUP_ID = 10001


class BuiltinMod(TypedDict):
    name: str
    author_id: int


BUILTIN_MODS: dict[int, BuiltinMod] = {
    1: {"name": "Hard Mode", "author_id": FAKE_DEVELOPER_AUTHOR_ID},
    2: {"name": "Unlimited Money", "author_id": FAKE_DEVELOPER_AUTHOR_ID},
    3: {"name": "Unlimited Oil And Ore", "author_id": FAKE_DEVELOPER_AUTHOR_ID},
    4: {"name": "Unlimited Soil", "author_id": FAKE_DEVELOPER_AUTHOR_ID},
    5: {"name": "Unlock All", "author_id": FAKE_DEVELOPER_AUTHOR_ID},
}

FAKE_DEVELOPER_AUTHOR_NAME = "Colossal Order"
