# Overview: Flask extension instances plus accessors for the per-app ledger state.

from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()

LEDGER_EXTENSION = "saree_ledger"
POS_SESSION_EXTENSION = "saree_pos_session"


def get_ledger():
    return current_app.extensions[LEDGER_EXTENSION]


def get_pos_session():
    return current_app.extensions[POS_SESSION_EXTENSION]
