import os
from logging import getLogger
from typing import List, Optional

from pydantic import BaseModel, ValidationError

from ..common.errors import CacheError
from ..java.model import Dependency, JavaClass

log = getLogger(__name__)


class Catalog(BaseModel):
    """All known dependencies with the classes they provide, persisted as the class cache"""

    dependencies: List[Dependency] = []

    def __len__(self) -> int:
        return len(self.dependencies)

    def find_class(self, java_class: JavaClass) -> Optional[Dependency]:
        """First dependency providing the class, in catalog order"""
        log.debug(f'Looking for dependency providing class {java_class.name}')
        for dependency in self.dependencies:
            if dependency.provides(java_class):
                return dependency
        return None

    def save(self, path: str):
        data = self.model_dump_json(indent=1)
        with open(path, 'wt', encoding='utf-8') as f:
            f.write(data)
        log.info(f'Updated cache {path}')

    @classmethod
    def load(cls, path: str) -> 'Catalog':
        if not os.path.isfile(path):
            raise CacheError(f'Missing cache file {path}, run the update command first')

        try:
            with open(path, 'rt', encoding='utf-8') as f:
                data = f.read()
            return cls.model_validate_json(data)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            raise CacheError(f'Cannot read cache file {path}: {e}') from e
