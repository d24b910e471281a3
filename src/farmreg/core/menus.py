"""Screen texts shown to the farmer. Bodies only; the CON/END prefix is added on render."""

from farmreg.core.validators import format_acres
from farmreg.models.registration import RegistrationRecord
from farmreg.models.session import PendingRegistration

SUPPORT_PHONE = "0700000000"

COUNTIES = {
    "1": "Nairobi",
    "2": "Kiambu",
    "3": "Machakos",
    "4": "Nakuru",
    "5": "Meru",
    "6": "Kisumu",
    "7": "Mombasa",
}
OTHER_COUNTY = "8"

CROPS = {
    "1": "Maize",
    "2": "Wheat",
    "3": "Rice",
    "4": "Beans",
    "5": "Potatoes",
    "6": "Tea",
    "7": "Coffee",
    "8": "Sugarcane",
}
OTHER_CROP = "9"

FARM_SIZE_EXAMPLE = "(Example: 2.5 or 10)"

NAME_PROMPT = "Welcome to Farmer Registration\nPlease enter your full name:"
CUSTOM_COUNTY_PROMPT = "Please type your county name:"
CUSTOM_CROP_PROMPT = "Please type your crop type:"
FARM_SIZE_PROMPT = f"Enter your farm size in acres:\n{FARM_SIZE_EXAMPLE}"
FARM_SIZE_RETRY = f"Invalid farm size. Please enter a valid number:\n{FARM_SIZE_EXAMPLE}"

NOT_REGISTERED = "You are not registered yet.\nPlease dial again and select option 1 to register."
GOODBYE = "Thank you for using Farmer Registration Service.\nGoodbye!"
INVALID_OPTION = "Invalid option. Please try again."
INVALID_SELECTION = "Invalid selection. Please try again."
REGISTRATION_CANCELLED = "Registration cancelled.\nDial again to start over."
INVALID_CONFIRMATION = "Invalid option. Registration cancelled."
GENERIC_ERROR = "An error occurred. Please dial again to restart."
SYSTEM_ERROR = "System error. Please try again later."
REQUEST_TIMEOUT = "Request timeout. Please try again."


def _numbered(options: dict[str, str], other_key: str) -> str:
    lines = [f"{key}. {label}" for key, label in options.items()]
    lines.append(f"{other_key}. Other")
    return "\n".join(lines)


def main_menu() -> str:
    return (
        "Welcome to Farmer Registration Service\n"
        "Please select an option:\n"
        "1. Register as new farmer\n"
        "2. Check registration status\n"
        "3. Exit"
    )


def county_menu() -> str:
    return "Enter your county location:\n" + _numbered(COUNTIES, OTHER_COUNTY)


def crop_menu() -> str:
    return "Select your main crop:\n" + _numbered(CROPS, OTHER_CROP)


def confirmation(data: PendingRegistration) -> str:
    return (
        "Confirm your details:\n"
        f"Name: {data.name}\n"
        f"County: {data.county}\n"
        f"Crop: {data.crop}\n"
        f"Farm: {format_acres(data.farm_size)} acres\n\n"
        "1. Confirm & Register\n"
        "2. Cancel"
    )


def registration_details(record: RegistrationRecord) -> str:
    return (
        "Your Registration Details:\n"
        f"Name: {record.name}\n"
        f"County: {record.county}\n"
        f"Crop: {record.crop}\n"
        f"Farm Size: {format_acres(record.farm_size)} acres\n"
        f"Registered: {record.registered_at_display}"
    )


def registration_success(name: str) -> str:
    return (
        "Registration successful!\n"
        f"Thank you {name}.\n"
        "You will receive SMS confirmation shortly.\n"
        f"For assistance, call {SUPPORT_PHONE}"
    )
