"""
Main Clarity code generator.

This module provides the ClarityCodeGenerator class that renders one
ClarityContract as the text of one .clar file, delegating each definition
kind to a specialized generator.
"""

import logging
from typing import List

from .context import GenerationContext
from .definition import DefinitionGenerator
from .expression import ExpressionGenerator
from .function import FunctionGenerator
from ..converter.clarity_ast import (
    ClarityContract,
    Constant,
    DataVar,
    Definition,
    DeployBlock,
    EventDoc,
    FunctionDef,
    Getter,
    Map,
)

logger = logging.getLogger(__name__)

PROVENANCE_NOTE = 'Generated by sol2clarity from Solidity source; do not edit by hand.'


class ClarityCodeGenerator:
    """
    Generates Clarity source code from a ClarityContract.

    Output layout:
    - a header comment naming the source contract
    - one block per definition, in declaration order, each preceded by
      its documentation comments and separated by a blank line
    """

    def __init__(self):
        self._ctx = GenerationContext()
        self._expr = ExpressionGenerator(self._ctx)
        self._def = DefinitionGenerator(self._ctx, self._expr)
        self._func = FunctionGenerator(self._ctx, self._expr)

    def generate(self, contract: ClarityContract) -> str:
        """Generate Clarity source for a contract.

        Args:
            contract: The lowered contract

        Returns:
            The file text, ending with a single newline
        """
        self._ctx.indent_level = 0

        blocks: List[str] = [self.generate_header(contract)]
        for definition in contract.definitions:
            blocks.append(self.generate_definition(definition))

        logger.debug('Rendered %s with %d block(s)', contract.file_name, len(blocks))
        return '\n\n'.join(blocks) + '\n'

    def generate_header(self, contract: ClarityContract) -> str:
        return '\n'.join([
            f';; Contract: {contract.name}',
            f';; {PROVENANCE_NOTE}',
        ])

    def generate_definition(self, definition: Definition) -> str:
        if isinstance(definition, DataVar):
            return self._def.generate_data_var(definition)
        elif isinstance(definition, Constant):
            return self._def.generate_constant(definition)
        elif isinstance(definition, Map):
            return self._def.generate_map(definition)
        elif isinstance(definition, Getter):
            return self._def.generate_getter(definition)
        elif isinstance(definition, EventDoc):
            return self._def.generate_event(definition)
        elif isinstance(definition, FunctionDef):
            return self._func.generate_function(definition)
        elif isinstance(definition, DeployBlock):
            return self._func.generate_deploy_block(definition)

        raise TypeError(f'Cannot render {type(definition).__name__}')
