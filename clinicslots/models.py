# Import every model module so Base.metadata knows all tables (create_all, tests).
from clinicslots.modules.clinics.models import Clinic  # noqa: F401
from clinicslots.modules.directory.models import Practitioner  # noqa: F401
from clinicslots.modules.catalogs.models import Service  # noqa: F401
from clinicslots.modules.patients.models import Patient  # noqa: F401
from clinicslots.modules.availability.models import PractitionerSchedule  # noqa: F401
from clinicslots.modules.bookings.models import Booking  # noqa: F401
from clinicslots.modules.events.outbox import EventOutbox  # noqa: F401
