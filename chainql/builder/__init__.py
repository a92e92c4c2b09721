"""Statement builders and the clause-assembly engine."""

from chainql.builder.base import CompiledSQL, Fragment, ParameterSink, Statement
from chainql.builder.conditions import ConditionList
from chainql.builder.delete import Delete
from chainql.builder.insert import Insert
from chainql.builder.json_ops import JsonOperations
from chainql.builder.select import Select
from chainql.builder.update import Update

__all__ = [
    "CompiledSQL",
    "ConditionList",
    "Delete",
    "Fragment",
    "Insert",
    "JsonOperations",
    "ParameterSink",
    "Select",
    "Statement",
    "Update",
]
