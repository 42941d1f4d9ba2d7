"""Attribute handlers for ``<template>`` tags, composed into the Parser."""

from asynchtml.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from asynchtml.parser.blocks.core import BlockStackMixin, OpenTag
from asynchtml.parser.blocks.functions import FunctionBlockParsingMixin, is_valid_mixin_name
from asynchtml.parser.blocks.template_structure import TemplateStructureBlockParsingMixin

__all__ = [
    "BlockStackMixin",
    "ControlFlowBlockParsingMixin",
    "FunctionBlockParsingMixin",
    "OpenTag",
    "TemplateStructureBlockParsingMixin",
    "is_valid_mixin_name",
]
