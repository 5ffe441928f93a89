from caselens.models.case import Case
from caselens.models.case_image import CaseImage

__all__ = ["Case", "CaseImage"]
