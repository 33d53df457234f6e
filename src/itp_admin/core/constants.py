"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 200

PLAYER_ID_PREFIX = "ITP_"
PLAYER_ID_WIDTH = 3
PLAYER_ID_MAX_ATTEMPTS = 3

EXPIRY_WARNING_DAYS = 30
VISA_OVERDUE_DAYS = 30

SIGNED_URL_MAX_AGE = 3600

PLAYER_DOCUMENTS_BUCKET = "player-documents"
ONBOARDING_BUCKET = "prospect-onboarding"

# Order used by the consolidated shopping list.
GROCERY_CATEGORY_ORDER = ("produce", "meat", "dairy", "carbs", "drinks", "spices", "frozen", "household")
GROCERY_CATEGORY_LABELS = {
    "produce": "Produce",
    "meat": "Meat & Eggs",
    "dairy": "Dairy",
    "carbs": "Carbs",
    "drinks": "Drinks",
    "spices": "Spices",
    "frozen": "Frozen",
    "household": "Household",
}

DAY_VIEW_FIRST_HOUR = 7

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

AIRPORT_LOCATIONS = ("Köln Bonn Airport (CGN)", "Frankfurt Airport (FRA)", "Düsseldorf Airport (DUS)")
TRAIN_STATION_LOCATIONS = ("Köln Hauptbahnhof", "Köln Messe/Deutz", "Köln Süd")

# Checklist keys with their English and German labels, in display order.
VISA_DOCUMENT_LABELS = {
    "passport": ("Passport", "Reisepass"),
    "birth_certificate": ("Birth Certificate", "Geburtsurkunde"),
    "parents_passports": ("Parents' Passports", "Pässe der Eltern"),
    "parental_power_of_attorney": ("Parental Power of Attorney", "Vollmacht der Eltern"),
    "housing_certificate": ("Housing Certificate", "Wohnungsgeberbescheinigung"),
    "lease_agreement": ("Lease Agreement", "Mietvertrag"),
    "registration_confirmation": ("Registration Confirmation", "Meldebestätigung"),
    "language_school_invitation": ("Language School Invitation", "Einladung Sprachschule"),
    "insurance_documents": ("Insurance Documents", "Versicherungsdokumente"),
    "declaration_of_commitment": ("Declaration of Commitment", "Verpflichtungserklärung"),
    "visa_application_form": ("Visa Application Form", "Antragsformular"),
}
# Parent documents only matter for minors.
MINOR_ONLY_VISA_DOCUMENTS = ("parents_passports", "parental_power_of_attorney")
VISA_REGISTRATION_DAYS = 90
VISA_URGENT_DAYS = 30

EU_NATIONALITIES = (
    "Germany", "German", "Austria", "Austrian", "France", "French", "Italy", "Italian",
    "Spain", "Spanish", "Portugal", "Portuguese", "Netherlands", "Dutch", "Belgium", "Belgian",
    "Poland", "Polish", "Sweden", "Swedish", "Denmark", "Danish", "Finland", "Finnish", "Ireland", "Irish",
    "Greece", "Greek", "Czech", "Czech Republic", "Hungary", "Hungarian", "Romania", "Romanian",
    "Bulgaria", "Bulgarian", "Croatia", "Croatian", "Slovakia", "Slovak", "Slovenia", "Slovenian",
    "Estonia", "Estonian", "Latvia", "Latvian", "Lithuania", "Lithuanian", "Luxembourg", "Malta", "Maltese", "Cyprus",
)

STAFF_INVITE_MAX_AGE = 7 * 24 * 3600
