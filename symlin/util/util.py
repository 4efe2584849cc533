import os
import re
from typing import Optional


# File I/O
# ----------------------------------------------------------------------------------------------------------------------

def get_file_path(dir_path: Optional[str], file_name: str = None) -> str:
    if dir_path is None:
        return file_name
    elif file_name is None:
        return dir_path
    return os.path.join(dir_path, file_name)


def read_file(path: str, file_name: str = None) -> str:
    with open(get_file_path(path, file_name), 'r') as f:
        text = f.read()
    return text


def write_file(dir_path: Optional[str], file_name: str, text: str):

    if dir_path is None:
        dir_path = os.getcwd()
    elif not os.path.isdir(dir_path):
        os.makedirs(dir_path)

    with open(os.path.join(dir_path, file_name), 'w') as f:
        f.write(text)


# Strings
# ----------------------------------------------------------------------------------------------------------------------

def sanitize_name(literal) -> str:
    """Replace every character other than a letter, a digit or an underscore by an underscore."""
    return re.sub(r"[^0-9A-Za-z_]", "_", str(literal))


def indent(text: str, level: int = 4) -> str:
    spaces = " " * level
    return "\n".join(spaces + line for line in text.split("\n"))
