"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# system_config keys
WORKING_DAYS_PER_MONTH = "WORKING_DAYS_PER_MONTH"
DEFAULT_LOCAL_LEAVE = "DEFAULT_LOCAL_LEAVE"
DEFAULT_SICK_LEAVE = "DEFAULT_SICK_LEAVE"
COMPANY_NAME = "COMPANY_NAME"
COMPANY_ADDRESS = "COMPANY_ADDRESS"
COMPANY_PHONE = "COMPANY_PHONE"
COMPANY_EMAIL = "COMPANY_EMAIL"

DEFAULT_WORKING_DAYS = 22
DEFAULT_LOCAL_LEAVE_DAYS = 15
DEFAULT_SICK_LEAVE_DAYS = 10

DEFAULT_SYSTEM_CONFIG = {
    WORKING_DAYS_PER_MONTH: (str(DEFAULT_WORKING_DAYS), "Default working days per month"),
    DEFAULT_LOCAL_LEAVE: (str(DEFAULT_LOCAL_LEAVE_DAYS), "Annual local leave entitlement"),
    DEFAULT_SICK_LEAVE: (str(DEFAULT_SICK_LEAVE_DAYS), "Annual sick leave entitlement"),
    COMPANY_NAME: ("HR Payroll Company", "Company name for payslips"),
    COMPANY_ADDRESS: ("123 Business Street, City, Country", "Company address for payslips"),
    COMPANY_PHONE: ("+1234567890", "Company phone number"),
    COMPANY_EMAIL: ("hr@example.com", "Company email address"),
}

# used when a company key is missing from system_config and the environment
PAYSLIP_COMPANY_FALLBACKS = {
    COMPANY_NAME: "Company Name",
    COMPANY_ADDRESS: "Company Address",
    COMPANY_PHONE: "N/A",
    COMPANY_EMAIL: "N/A",
}

HALF_DAY = Decimal("0.5")
MONEY_QUANT = Decimal("0.01")

DEFAULT_LIST_LIMIT = 500
