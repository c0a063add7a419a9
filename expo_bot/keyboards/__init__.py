from expo_bot.keyboards.callbacks import (
    MainMenuCb,
    WizardCb,
    ChoiceCb,
    PackageCb,
    DelegateCb,
    ConsentCb,
    AdminPanelCb,
)
from expo_bot.keyboards.main_menu import main_menu, registration_type_kb, back_to_main
from expo_bot.keyboards.registration_kb import (
    text_step_kb,
    choice_kb,
    organization_type_kb,
    payment_method_kb,
    package_choice_kb,
    delegates_kb,
    terms_kb,
    attendance_type_kb,
    gender_kb,
    race_category_kb,
    t_shirt_size_kb,
    skip_kb,
    confirm_kb,
)
from expo_bot.keyboards.packages_kb import comparison_kb
from expo_bot.keyboards.admin_kb import admin_overview_kb, admin_back_kb

__all__ = [
    # callbacks
    "MainMenuCb", "WizardCb", "ChoiceCb", "PackageCb",
    "DelegateCb", "ConsentCb", "AdminPanelCb",
    # main menu
    "main_menu", "registration_type_kb", "back_to_main",
    # registration
    "text_step_kb", "choice_kb", "organization_type_kb", "payment_method_kb",
    "package_choice_kb", "delegates_kb", "terms_kb",
    "attendance_type_kb", "gender_kb", "race_category_kb", "t_shirt_size_kb",
    "skip_kb", "confirm_kb",
    # packages
    "comparison_kb",
    # admin
    "admin_overview_kb", "admin_back_kb",
]
