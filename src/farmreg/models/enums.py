"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class Stage(str, enum.Enum):
    """Registration dialogue stages, in collection order."""

    MAIN_MENU = "MAIN_MENU"
    ENTER_NAME = "ENTER_NAME"
    SELECT_COUNTY = "SELECT_COUNTY"
    ENTER_CUSTOM_COUNTY = "ENTER_CUSTOM_COUNTY"
    SELECT_CROP = "SELECT_CROP"
    ENTER_CUSTOM_CROP = "ENTER_CUSTOM_CROP"
    ENTER_FARM_SIZE = "ENTER_FARM_SIZE"
    CONFIRM_REGISTRATION = "CONFIRM_REGISTRATION"


class DirectiveKind(str, enum.Enum):
    """What the gateway should do after showing the message."""

    CONTINUE = "CON"
    TERMINATE = "END"
