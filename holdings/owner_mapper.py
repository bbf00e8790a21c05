# holdings/owner_mapper.py
"""
Owner labels derived from upload filenames.

Broker exports are named like ``CLIENT John Doe CLIENT-ID 12345.xlsx``;
the text between the two markers is the owner. Anything else falls back
to the bare filename.
"""

import re


# Name between the CLIENT and CLIENT-ID markers; '-', '|' and '_' end it
CLIENT_PATTERN = re.compile(r"CLIENT\s*([^-|_]+?)\s*CLIENT-ID", re.IGNORECASE)

EXTENSION_PATTERN = re.compile(r"\.(xlsx|csv)$", re.IGNORECASE)


def extract_owner(filename: str) -> str:
    """
    Derive the owner label for a file.

    >>> extract_owner("CLIENT John_Doe CLIENT-ID 123.xlsx")
    'John Doe'
    >>> extract_owner("report.csv")
    'report'
    """
    # underscores separate words in exported filenames
    match = CLIENT_PATTERN.search(filename.replace("_", " "))
    if match:
        return match.group(1).strip()
    return EXTENSION_PATTERN.sub("", filename)

