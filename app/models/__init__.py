# Campus access control: Database Models
# Import all models here for SQLAlchemy discovery

from app.models.student import Student      # noqa
from app.models.guard import Guard          # noqa
from app.models.vehicle import Vehicle      # noqa
from app.models.helmet import Helmet        # noqa
from app.models.movement import Movement    # noqa
