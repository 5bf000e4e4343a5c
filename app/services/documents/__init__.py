from .policy import DocumentPolicy, DOCUMENT_POLICIES, get_policy, applicable_roles, required_roles
from .uploaded import UploadedDocument
from .validator import DocumentValidator
