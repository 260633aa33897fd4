import re

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")
# ISBN-10 or ISBN-13, optionally prefixed and separated by hyphens or spaces
ISBN_PATTERN = re.compile(
    r"^(?:ISBN(?:-1[03])?:? )?"
    r"(?=[0-9X]{10}$|(?=(?:[0-9]+[- ]){3})[- 0-9X]{13}$|97[89][0-9]{10}$|(?=(?:[0-9]+[- ]){4})[- 0-9]{17}$)"
    r"(?:97[89][- ]?)?[0-9]{1,5}[- ]?[0-9]+[- ]?[0-9]+[- ]?[0-9X]$"
)

def is_valid_email(email: str) -> bool:
    return email is not None and EMAIL_PATTERN.match(email) is not None

def is_valid_phone(phone: str) -> bool:
    return phone is not None and PHONE_PATTERN.match(phone) is not None

def is_valid_isbn(isbn: str) -> bool:
    return isbn is not None and ISBN_PATTERN.match(isbn) is not None
