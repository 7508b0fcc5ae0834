# src/hostagent/config/const.py
from __future__ import annotations

# Mailbox layout (contract with the external consumer, do not rename)
COMMANDS_DIRNAME = "commands"
PENDING_DIRNAME = "pending"
SUBMITTED_DIRNAME = "submitted"
INVALID_DIRNAME = "invalid"
ENTRY_SUFFIX_SEPARATOR = "."

# submission polling policy
SUBMIT_POLL_ATTEMPTS: int = 10
SUBMIT_POLL_INTERVAL_SEC: float = 0.5

# supervised execution
DEFAULT_EXEC_TIMEOUT_SEC: float = 30.0
DEFAULT_OUTPUT_FOLDER = "output"
DEFAULT_STDOUT = "stdout"
DEFAULT_STDERR = "stderr"
COMMAND_STOPPED_PREEMPTIVELY_EXIT_CODE = 137
AMBIGUOUS_EXIT_STATUS = -1

# managed service
SERVICE_NAME = "hostagent"
WINDOWS_SERVICE_NAME = "HostAgent"
SYSTEMD_EXPECTED_STATUS = "Active: active (running)"
UPSTART_EXPECTED_STATUS = "running"
WINDOWS_EXPECTED_STATUS = "RUNNING"

# platform names
PLATFORM_LINUX = "linux"
PLATFORM_AMAZON_LINUX = "amazon"
PLATFORM_REDHAT = "red hat"
PLATFORM_UBUNTU = "ubuntu"
PLATFORM_CENTOS = "centos"
PLATFORM_WINDOWS = "windows"

# update layout
UPDATER = "updater"
INSTALLER = "install.sh"
UNINSTALLER = "uninstall.sh"
UPDATE_CONTEXT_FILENAME = "updatecontext.json"
UPDATE_PLUGIN_RESULT_FILENAME = "updatepluginresult.json"
MINIMUM_DISK_SPACE_FOR_UPDATE = 104_857_600  # 100 MiB
