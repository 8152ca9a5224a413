from sehat.db.models.report import MedicalReport, AnalysisStatus  # noqa: F401
from sehat.db.models.vital import Vital  # noqa: F401
from sehat.db.models.profile import Profile  # noqa: F401
