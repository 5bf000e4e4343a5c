from enum import Enum


class ProvisioningStage(str, Enum):
    validating = "validating"
    saving_files = "saving_files"
    generating_credential = "generating_credential"
    persisting = "persisting"
    done = "done"
    failed = "failed"
