from expo_bot.states.registration_states import (
    SponsorRegistrationStates,
    DelegateRegistrationStates,
    MarathonRegistrationStates,
    PackageComparisonStates,
)

__all__ = [
    "SponsorRegistrationStates",
    "DelegateRegistrationStates",
    "MarathonRegistrationStates",
    "PackageComparisonStates",
]
