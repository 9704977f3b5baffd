#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Registry of defined models, keyed by name."""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import logging

from anydb_sql.commons.errors import ReferenceNotFound

LOGGER = logging.getLogger(__name__)


class ModelStore:
    """Name to model mapping, filled while defining the schema.

    Lookups happen lazily, when a relation is first traversed, so models
    may refer to each other before both are defined.
    """

    def __init__(self):
        self._models = {}

    def register(self, name: str, model) -> None:
        if name in self._models:
            LOGGER.warning("Model '%s' is being redefined", name)
        self._models[name] = model

    def lookup(self, name: str, owner: str = None):
        """Get a model by name.

        :param name: the model name
        :param owner: the relation asking for the model, for error messages
        :raises ReferenceNotFound: when no model has that name
        """
        try:
            return self._models[name]
        except KeyError:
            raise ReferenceNotFound(name, owner) from None

    def get(self, name: str, default=None):
        return self._models.get(name, default)

    def names(self) -> list:
        return list(self._models)

    def __getitem__(self, name: str):
        return self.lookup(name)

    def __contains__(self, name) -> bool:
        return name in self._models

    def __iter__(self):
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)
