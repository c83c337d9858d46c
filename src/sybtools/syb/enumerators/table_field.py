from enum import Enum


class TableField(Enum):
    FILE_NAME = "name"
    FILE_SIZE = "size"
