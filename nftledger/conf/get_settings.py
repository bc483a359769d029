# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import importlib
import logging
import os
from functools import lru_cache

from nftledger.conf.settings import CollectionSettings

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "NFTLEDGER_CONFIG_FILE"
DEFAULT_CONFIG_MODULE = "nftledger.conf.mainnet"


@lru_cache(maxsize=None)
def get_settings() -> CollectionSettings:
    """Load `SETTINGS` from the module named by NFTLEDGER_CONFIG_FILE."""
    module_name = os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_MODULE)
    logger.debug("loading collection settings from %s", module_name)
    module = importlib.import_module(module_name)
    settings = getattr(module, "SETTINGS", None)
    if not isinstance(settings, CollectionSettings):
        raise TypeError(f"{module_name}.SETTINGS must be a CollectionSettings instance")
    return settings
