from .handlers import (  # noqa: F401
    handle_post_confirmation,
    handle_pre_provisioning,
    handle_pre_user_delete,
    handle_thing_created,
)
