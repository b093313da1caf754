# Parkki — Database Models
# Import all models here for SQLAlchemy discovery

from parkki.models.camera import Camera   # noqa
from parkki.models.event import Event     # noqa
