from .directory import CognitoDirectory, provider_name_from_issuer  # noqa: F401
