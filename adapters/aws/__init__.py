"""AWS adapters: error translation, client construction, IAM role bindings."""

from .errors import ERROR_CODE_MAP, aws_call, translate_client_error  # noqa: F401
from .iam_roles import IamRoleBindings  # noqa: F401
from .session import AwsClients, build_clients  # noqa: F401
