"""
Test utilities package for timezone bot tests.

## Available Modules

### test_helpers.py
- `FakeChatClient`: recording chat client with configurable guilds, admins
  and login failures
- `StoreSpy`: in-memory key-value store counting reads and writes
- `make_message()`: inbound message factory
- `fixed_clock()`: clock pinned to `FIXED_INSTANT`
- `wait_for_condition()`: poll an async condition with timeout
- `create_temp_config_file()`: context manager for temporary YAML config files
"""

from .test_helpers import (
    ADMIN_ID,
    CHANNEL_ID,
    FIXED_INSTANT,
    GUILD_ID,
    MEMBER_ID,
    FakeChatClient,
    StoreSpy,
    create_temp_config_file,
    fixed_clock,
    make_message,
    wait_for_condition,
)

__all__ = [
    "ADMIN_ID",
    "CHANNEL_ID",
    "FIXED_INSTANT",
    "GUILD_ID",
    "MEMBER_ID",
    "FakeChatClient",
    "StoreSpy",
    "create_temp_config_file",
    "fixed_clock",
    "make_message",
    "wait_for_condition",
]
