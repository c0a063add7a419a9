from aiogram.fsm.state import State, StatesGroup


class SponsorRegistrationStates(StatesGroup):
    """FSM for the multi-step sponsor wizard."""
    company_name      = State()   # Text input
    company_website   = State()   # Text input (or skip)
    country           = State()   # Text input
    organization_type = State()   # Inline choice
    company_logo      = State()   # Photo/document upload (or skip)
    full_name         = State()   # Contact person
    job_title         = State()
    email             = State()
    phone             = State()
    package           = State()   # Inline choice from the catalog
    delegates         = State()   # Delegate list editor
    delegate_name     = State()   # Text input for one delegate slot
    fascia_name       = State()   # Text input, max 25 chars
    social_media      = State()   # Optional handles, one message
    payment_method    = State()   # Inline choice
    terms             = State()   # Two consent toggles → submit


class DelegateRegistrationStates(StatesGroup):
    """FSM for individual delegate sign-up."""
    first_name      = State()
    last_name       = State()
    email           = State()
    phone           = State()
    company         = State()
    job_title       = State()
    attendance_type = State()
    dietary         = State()
    confirm         = State()


class MarathonRegistrationStates(StatesGroup):
    """FSM for First Lady Marathon entry."""
    full_name         = State()
    email             = State()
    phone             = State()
    date_of_birth     = State()
    gender            = State()
    emergency_contact = State()   # "name, phone, relationship" in one message
    race_category     = State()
    t_shirt_size      = State()
    medical           = State()
    confirm           = State()


class PackageComparisonStates(StatesGroup):
    """Package comparison screen (selection kept in FSM data)."""
    comparing = State()
