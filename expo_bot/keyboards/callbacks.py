"""
Centralized CallbackData factories.
Telegram limits callback_data to 64 bytes — all prefixes are kept short.
"""
from aiogram.filters.callback_data import CallbackData


class MainMenuCb(CallbackData, prefix="mm"):
    action: str           # main | register | packages | delegate | marathon | sponsor


class WizardCb(CallbackData, prefix="wz"):
    action: str           # next | back | skip | submit | cancel
    step: str = ""        # wizard step id the button belongs to


class ChoiceCb(CallbackData, prefix="ch"):
    field: str            # organization_type | payment_method | attendance_type | gender | race | tshirt
    value: str


class PackageCb(CallbackData, prefix="pkg"):
    action: str           # choose | toggle | clear | details
    pid: str = ""         # package id


class DelegateCb(CallbackData, prefix="dlg"):
    action: str           # add | dec | remove | edit | done
    idx: int = 0


class ConsentCb(CallbackData, prefix="cns"):
    field: str            # terms_accepted | consent_given


class AdminPanelCb(CallbackData, prefix="adm"):
    action: str           # overview | sponsors | attendees
