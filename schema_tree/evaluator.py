"""
evaluator.py - the three evaluation strategies over a validator tree.

Public API
----------
validate(node, instance, instance_location=ROOT) -> bool
    Short-circuiting boolean strategy; builds no messages.
validate_basic(node, instance, relative_location=ROOT, instance_location=ROOT) -> BasicOutput
    Flat, ordered error list.  Failing groups and combinators emit their
    own summary entry before their children's entries.
validate_detailed(node, instance, relative_location=ROOT, instance_location=ROOT) -> DetailedOutput
    Annotated outcome tree.  A single failing child collapses into its
    parent; several are wrapped under the parent's summary.

Every concrete node class in :pymod:`schema_tree.nodes` is registered with
each strategy.  Leaf constraints share one ``failure(node, instance)``
dispatch that returns the error message or ``None``.

Each node reports at the ``relative_location`` its parent hands it; parents
compute that location with ``child.child_location(relative)``.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from functools import singledispatch
from typing import Any, Optional, Sequence

from . import nodes as n
from .output import BasicErrorEntry, BasicOutput, DetailedOutput
from .pointer import Pointer
from .utils import (
    error_display,
    exact_number,
    is_array,
    is_finite,
    is_integer,
    is_number,
    is_object,
    json_equal,
    json_type,
)

__all__ = ["validate", "validate_basic", "validate_detailed", "failure", "LEAF_TYPES"]

ROOT = Pointer.ROOT

SUBSCHEMA_ERROR = "A subschema had errors"
SUCCESS = "Validation successful"

# --------------------------------------------------------------------------- #
# Output helpers                                                              #
# --------------------------------------------------------------------------- #


def _entry(node: n.Node, relative: Pointer, instance_location: Pointer, message: str,
           absolute: Optional[str] = None) -> BasicErrorEntry:
    return BasicErrorEntry(
        relative.schema_fragment(),
        absolute if absolute is not None else node.absolute_location,
        instance_location.schema_fragment(),
        message,
    )


def _error(node: n.Node, relative: Pointer, instance_location: Pointer, message: str,
           errors: Sequence[DetailedOutput] | None = None,
           annotations: Sequence[DetailedOutput] | None = None) -> DetailedOutput:
    return DetailedOutput.create_error(
        relative.schema_fragment(), node.absolute_location, instance_location.schema_fragment(),
        message, errors, annotations,
    )


def _annotation(node: n.Node, relative: Pointer, instance_location: Pointer, message: str,
                errors: Sequence[DetailedOutput] | None = None,
                annotations: Sequence[DetailedOutput] | None = None) -> DetailedOutput:
    return DetailedOutput.create_annotation(
        relative.schema_fragment(), node.absolute_location, instance_location.schema_fragment(),
        message, errors, annotations,
    )


def _collapse(node: n.Node, relative: Pointer, instance_location: Pointer,
              errors: list[DetailedOutput], success: str, failure_message: str) -> DetailedOutput:
    if not errors:
        return _annotation(node, relative, instance_location, success)
    if len(errors) == 1:
        return errors[0]
    return _error(node, relative, instance_location, failure_message, errors)


def _flatten(outputs: Sequence[BasicOutput]) -> list[BasicErrorEntry]:
    entries: list[BasicErrorEntry] = []
    for out in outputs:
        if not out.valid and out.errors:
            entries.extend(out.errors)
    return entries


def _result(entries: list[BasicErrorEntry]) -> BasicOutput:
    return BasicOutput.failure(entries) if entries else BasicOutput.TRUE


# --------------------------------------------------------------------------- #
# Dispatch roots                                                              #
# --------------------------------------------------------------------------- #

@singledispatch
def validate(node: n.Node, instance: Any, instance_location: Pointer = ROOT) -> bool:
    raise TypeError(f"No boolean evaluation for {type(node).__name__}")


@singledispatch
def validate_basic(node: n.Node, instance: Any, relative_location: Pointer = ROOT,
                   instance_location: Pointer = ROOT) -> BasicOutput:
    raise TypeError(f"No basic evaluation for {type(node).__name__}")


@singledispatch
def validate_detailed(node: n.Node, instance: Any, relative_location: Pointer = ROOT,
                      instance_location: Pointer = ROOT) -> DetailedOutput:
    raise TypeError(f"No detailed evaluation for {type(node).__name__}")


@singledispatch
def failure(node: n.Node, instance: Any) -> Optional[str]:
    """Error message for a leaf constraint, or ``None`` when satisfied."""
    raise TypeError(f"{type(node).__name__} is not a leaf constraint")


# --------------------------------------------------------------------------- #
# Constant schemas                                                            #
# --------------------------------------------------------------------------- #

@validate.register
def _(node: n.BooleanTrue, instance, instance_location=ROOT):
    return True


@validate_basic.register
def _(node: n.BooleanTrue, instance, relative_location=ROOT, instance_location=ROOT):
    return BasicOutput.TRUE


@validate_detailed.register
def _(node: n.BooleanTrue, instance, relative_location=ROOT, instance_location=ROOT):
    return _annotation(node, relative_location, instance_location, 'Constant schema "true"')


@validate.register
def _(node: n.BooleanFalse, instance, instance_location=ROOT):
    return False


@validate_basic.register
def _(node: n.BooleanFalse, instance, relative_location=ROOT, instance_location=ROOT):
    return BasicOutput.failure(
        [_entry(node, relative_location, instance_location, 'Constant schema "false"')])


@validate_detailed.register
def _(node: n.BooleanFalse, instance, relative_location=ROOT, instance_location=ROOT):
    return _error(node, relative_location, instance_location, 'Constant schema "false"')


# --------------------------------------------------------------------------- #
# Group                                                                       #
# --------------------------------------------------------------------------- #

@validate.register
def _(node: n.Group, instance, instance_location=ROOT):
    return all(validate(child, instance, instance_location) for child in node.children)


@validate_basic.register
def _(node: n.Group, instance, relative_location=ROOT, instance_location=ROOT):
    entries = _flatten([
        validate_basic(child, instance, child.child_location(relative_location), instance_location)
        for child in node.children
    ])
    if not entries:
        return BasicOutput.TRUE
    entries.insert(0, _entry(node, relative_location, instance_location, SUBSCHEMA_ERROR))
    return BasicOutput.failure(entries)


@validate_detailed.register
def _(node: n.Group, instance, relative_location=ROOT, instance_location=ROOT):
    errors = []
    for child in node.children:
        out = validate_detailed(child, instance, child.child_location(relative_location), instance_location)
        if not out.valid:
            errors.append(out)
    return _collapse(node, relative_location, instance_location, errors, SUCCESS, SUBSCHEMA_ERROR)


# --------------------------------------------------------------------------- #
# not / allOf / anyOf / oneOf                                                 #
# --------------------------------------------------------------------------- #

@validate.register
def _(node: n.Not, instance, instance_location=ROOT):
    return not validate(node.child, instance, instance_location)


@validate_basic.register
def _(node: n.Not, instance, relative_location=ROOT, instance_location=ROOT):
    if validate_basic(node.child, instance, relative_location, instance_location).valid:
        return BasicOutput.failure(
            [_entry(node, relative_location, instance_location, 'Schema "not" - target was valid')])
    return BasicOutput.TRUE


@validate_detailed.register
def _(node: n.Not, instance, relative_location=ROOT, instance_location=ROOT):
    nested = validate_detailed(node.child, instance, relative_location, instance_location)
    if nested.valid:
        return _error(node, relative_location, instance_location, 'Schema "not" - target was valid',
                      annotations=[nested])
    return _annotation(node, relative_location, instance_location, 'Schema "not" - target was invalid',
                       errors=[nested])


def _combination_valid(kind: str, true_count: int, total: int) -> bool:
    if kind == "allOf":
        return true_count == total
    if kind == "anyOf":
        return true_count > 0
    return true_count == 1


def _combination_message(node: n.Combinator, true_count: int, valid: bool) -> str:
    verdict = "succeeds" if valid else "fails"
    return f'Combination schema "{node.kind}" {verdict} - {true_count} of {len(node.children)} valid'


@validate.register
def _(node: n.Combinator, instance, instance_location=ROOT):
    if node.kind == "allOf":
        return all(validate(c, instance, instance_location) for c in node.children)
    if node.kind == "anyOf":
        return any(validate(c, instance, instance_location) for c in node.children)
    matched = 0
    for child in node.children:
        if validate(child, instance, instance_location):
            matched += 1
            if matched > 1:
                return False
    return matched == 1


@validate_basic.register
def _(node: n.Combinator, instance, relative_location=ROOT, instance_location=ROOT):
    entries: list[BasicErrorEntry] = []
    true_count = 0
    for i, child in enumerate(node.children):
        out = validate_basic(child, instance, relative_location.child(i), instance_location)
        if out.valid:
            true_count += 1
        elif out.errors:
            entries.extend(out.errors)
    if _combination_valid(node.kind, true_count, len(node.children)):
        return BasicOutput.TRUE
    entries.insert(0, _entry(node, relative_location, instance_location,
                             _combination_message(node, true_count, False)))
    return BasicOutput.failure(entries)


@validate_detailed.register
def _(node: n.Combinator, instance, relative_location=ROOT, instance_location=ROOT):
    errors, annotations = [], []
    for i, child in enumerate(node.children):
        out = validate_detailed(child, instance, relative_location.child(i), instance_location)
        (annotations if out.valid else errors).append(out)
    valid = _combination_valid(node.kind, len(annotations), len(node.children))
    message = _combination_message(node, len(annotations), valid)
    if valid:
        return _annotation(node, relative_location, instance_location, message, errors, annotations)
    return _error(node, relative_location, instance_location, message, errors, annotations)


# --------------------------------------------------------------------------- #
# if / then / else                                                            #
# --------------------------------------------------------------------------- #

@validate.register
def _(node: n.Conditional, instance, instance_location=ROOT):
    branch = node.then_schema if validate(node.if_schema, instance, instance_location) else node.else_schema
    return branch is None or validate(branch, instance, instance_location)


@validate_basic.register
def _(node: n.Conditional, instance, relative_location=ROOT, instance_location=ROOT):
    if validate(node.if_schema, instance, instance_location):
        branch, name = node.then_schema, "then"
    else:
        branch, name = node.else_schema, "else"
    if branch is None:
        return BasicOutput.TRUE
    return validate_basic(branch, instance, relative_location.child(name), instance_location)


@validate_detailed.register
def _(node: n.Conditional, instance, relative_location=ROOT, instance_location=ROOT):
    if_result = validate_detailed(node.if_schema, instance, relative_location.child("if"), instance_location)
    if if_result.valid:
        branch, name, message = node.then_schema, "then", '"if" schema is true'
    else:
        branch, name, message = node.else_schema, "else", '"if" schema is false'
    if branch is None:
        return _annotation(node, relative_location, instance_location, message, annotations=[if_result])
    branch_result = validate_detailed(branch, instance, relative_location.child(name), instance_location)
    if branch_result.valid:
        return _annotation(node, relative_location, instance_location, message,
                           annotations=[if_result, branch_result])
    return _error(node, relative_location, instance_location, SUBSCHEMA_ERROR,
                  errors=[branch_result], annotations=[if_result])


# --------------------------------------------------------------------------- #
# $ref                                                                        #
# --------------------------------------------------------------------------- #

@validate.register
def _(node: n.Reference, instance, instance_location=ROOT):
    return validate(node.target, instance, instance_location)


@validate_basic.register
def _(node: n.Reference, instance, relative_location=ROOT, instance_location=ROOT):
    return validate_basic(node.target, instance, relative_location, instance_location)


@validate_detailed.register
def _(node: n.Reference, instance, relative_location=ROOT, instance_location=ROOT):
    result = validate_detailed(node.target, instance, relative_location, instance_location)
    if result.valid:
        return _annotation(node, relative_location, instance_location, "$ref schema valid")
    return _error(node, relative_location, instance_location, "$ref schema invalid", [result])


# --------------------------------------------------------------------------- #
# Custom keywords                                                             #
# --------------------------------------------------------------------------- #

@validate.register
def _(node: n.DelegatingConstraint, instance, instance_location=ROOT):
    return validate(node.inner, instance, instance_location)


@validate_basic.register
def _(node: n.DelegatingConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    return validate_basic(node.inner, instance, relative_location, instance_location)


@validate_detailed.register
def _(node: n.DelegatingConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    return validate_detailed(node.inner, instance, relative_location, instance_location)


# --------------------------------------------------------------------------- #
# Object containers                                                           #
# --------------------------------------------------------------------------- #

def _matching_properties(node: n.PropertiesConstraint, instance):
    for name, schema in node.properties:
        if name in instance:
            yield name, name, schema


def _matching_patterns(node: n.PatternPropertiesConstraint, instance):
    for regex, schema in node.properties:
        for name in instance:
            if regex.search(name):
                yield regex.pattern, name, schema


_OBJECT_CONTAINERS = {
    n.PropertiesConstraint: (_matching_properties, "Properties are valid", "Errors in properties"),
    n.PatternPropertiesConstraint: (
        _matching_patterns, "patternProperties are valid", "Errors in patternProperties"),
}


@validate.register(n.PropertiesConstraint)
@validate.register(n.PatternPropertiesConstraint)
def _validate_object_container(node, instance, instance_location=ROOT):
    if not is_object(instance):
        return True
    matches = _OBJECT_CONTAINERS[type(node)][0]
    return all(
        validate(schema, instance[name], instance_location.child(name))
        for _segment, name, schema in matches(node, instance)
    )


@validate_basic.register(n.PropertiesConstraint)
@validate_basic.register(n.PatternPropertiesConstraint)
def _basic_object_container(node, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_object(instance):
        return BasicOutput.TRUE
    matches = _OBJECT_CONTAINERS[type(node)][0]
    return _result(_flatten([
        validate_basic(schema, instance[name], relative_location.child(segment), instance_location.child(name))
        for segment, name, schema in matches(node, instance)
    ]))


@validate_detailed.register(n.PropertiesConstraint)
@validate_detailed.register(n.PatternPropertiesConstraint)
def _detailed_object_container(node, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_object(instance):
        return _annotation(node, relative_location, instance_location, "Value is not an object")
    matches, success, failure_message = _OBJECT_CONTAINERS[type(node)]
    errors = []
    for segment, name, schema in matches(node, instance):
        out = validate_detailed(schema, instance[name], relative_location.child(segment),
                                instance_location.child(name))
        if not out.valid:
            errors.append(out)
    return _collapse(node, relative_location, instance_location, errors, success, failure_message)


@validate.register
def _(node: n.AdditionalPropertiesConstraint, instance, instance_location=ROOT):
    if not is_object(instance):
        return True
    return all(
        validate(node.schema, value, instance_location.child(name))
        for name, value in instance.items() if node.is_additional(name)
    )


@validate_basic.register
def _(node: n.AdditionalPropertiesConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_object(instance):
        return BasicOutput.TRUE
    entries: list[BasicErrorEntry] = []
    for name, value in instance.items():
        if not node.is_additional(name):
            continue
        location = instance_location.child(name)
        out = validate_basic(node.schema, value, relative_location, location)
        if not out.valid:
            entries.append(_entry(node, relative_location, location,
                                  f"Additional property '{name}' found but was invalid"))
            entries.extend(out.errors or ())
    return _result(entries)


@validate_detailed.register
def _(node: n.AdditionalPropertiesConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_object(instance):
        return _annotation(node, relative_location, instance_location, "Value is not an object")
    errors = []
    for name, value in instance.items():
        if not node.is_additional(name):
            continue
        location = instance_location.child(name)
        out = validate_detailed(node.schema, value, relative_location, location)
        if not out.valid:
            errors.append(_error(node, relative_location, location,
                                 f"Additional property '{name}' found but was invalid", [out]))
    return _collapse(node, relative_location, instance_location, errors,
                     "properties are valid", "Errors in properties")


@validate.register
def _(node: n.PropertyNamesConstraint, instance, instance_location=ROOT):
    if not is_object(instance):
        return True
    return all(validate(node.schema, name, instance_location.child(name)) for name in instance)


@validate_basic.register
def _(node: n.PropertyNamesConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_object(instance):
        return BasicOutput.TRUE
    return _result(_flatten([
        validate_basic(node.schema, name, relative_location, instance_location.child(name))
        for name in instance
    ]))


@validate_detailed.register
def _(node: n.PropertyNamesConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_object(instance):
        return _annotation(node, relative_location, instance_location, "Value is not an object")
    errors = []
    for name in instance:
        out = validate_detailed(node.schema, name, relative_location, instance_location.child(name))
        if not out.valid:
            errors.append(out)
    return _collapse(node, relative_location, instance_location, errors,
                     "Property names are valid", "Errors in property names")


def _missing(node: n.RequiredConstraint, instance) -> list[tuple[int, str]]:
    return [(i, name) for i, name in enumerate(node.names) if name not in instance]


@validate.register
def _(node: n.RequiredConstraint, instance, instance_location=ROOT):
    return not is_object(instance) or all(name in instance for name in node.names)


@validate_basic.register
def _(node: n.RequiredConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_object(instance):
        return BasicOutput.TRUE
    return _result([
        _entry(node, relative_location.child(i), instance_location, f'Required property "{name}" not found')
        for i, name in _missing(node, instance)
    ])


@validate_detailed.register
def _(node: n.RequiredConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_object(instance):
        return _annotation(node, relative_location, instance_location, "Value is not an object")
    errors = [
        _error(node, relative_location.child(i), instance_location, f'Required property "{name}" not found')
        for i, name in _missing(node, instance)
    ]
    return _collapse(node, relative_location, instance_location, errors,
                     "All required properties found", "Required property error")


# --------------------------------------------------------------------------- #
# Array containers                                                            #
# --------------------------------------------------------------------------- #

def _item_targets(node, instance, relative_location):
    """Yield ``(schema, relative, index)`` for each item a container checks."""
    if isinstance(node, n.ItemsConstraint):
        for i in range(len(instance)):
            yield node.schema, relative_location, i
    else:
        for i in range(min(len(instance), len(node.schemas))):
            yield node.schemas[i], relative_location.child(i), i


@validate.register(n.ItemsConstraint)
@validate.register(n.ItemsTupleConstraint)
def _validate_items(node, instance, instance_location=ROOT):
    if not is_array(instance):
        return True
    return all(
        validate(schema, instance[i], instance_location.child(i))
        for schema, _relative, i in _item_targets(node, instance, ROOT)
    )


@validate_basic.register(n.ItemsConstraint)
@validate_basic.register(n.ItemsTupleConstraint)
def _basic_items(node, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_array(instance):
        return BasicOutput.TRUE
    return _result(_flatten([
        validate_basic(schema, instance[i], relative, instance_location.child(i))
        for schema, relative, i in _item_targets(node, instance, relative_location)
    ]))


@validate_detailed.register(n.ItemsConstraint)
@validate_detailed.register(n.ItemsTupleConstraint)
def _detailed_items(node, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_array(instance):
        return _annotation(node, relative_location, instance_location, "Value is not an array")
    errors = []
    for schema, relative, i in _item_targets(node, instance, relative_location):
        out = validate_detailed(schema, instance[i], relative, instance_location.child(i))
        if not out.valid:
            errors.append(out)
    return _collapse(node, relative_location, instance_location, errors,
                     "All items are valid", "Errors in array items")


def _additional_indices(node: n.AdditionalItemsConstraint, instance) -> range:
    # without tuple-form items there is nothing additional, even when items is absent
    if not node.applies:
        return range(0)
    return range(node.tuple_size, len(instance))


@validate.register
def _(node: n.AdditionalItemsConstraint, instance, instance_location=ROOT):
    if not is_array(instance):
        return True
    return all(
        validate(node.schema, instance[i], instance_location.child(i))
        for i in _additional_indices(node, instance)
    )


@validate_basic.register
def _(node: n.AdditionalItemsConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_array(instance):
        return BasicOutput.TRUE
    entries: list[BasicErrorEntry] = []
    for i in _additional_indices(node, instance):
        location = instance_location.child(i)
        out = validate_basic(node.schema, instance[i], relative_location, location)
        if not out.valid:
            entries.append(_entry(node, relative_location, location, f"Additional item {i} found but was invalid"))
            entries.extend(out.errors or ())
    return _result(entries)


@validate_detailed.register
def _(node: n.AdditionalItemsConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    if not is_array(instance):
        return _annotation(node, relative_location, instance_location, "Value is not an array")
    errors = []
    for i in _additional_indices(node, instance):
        location = instance_location.child(i)
        out = validate_detailed(node.schema, instance[i], relative_location, location)
        if not out.valid:
            errors.append(_error(node, relative_location, location,
                                 f"Additional item {i} found but was invalid", [out]))
    return _collapse(node, relative_location, instance_location, errors, "items are valid", "Errors in items")


# --------------------------------------------------------------------------- #
# contains                                                                    #
# --------------------------------------------------------------------------- #

def _contains_problem(node: n.ContainsConstraint, instance, instance_location: Pointer):
    """Return ``(sibling keyword or None, message)`` for a failing contains."""
    if not is_array(instance):
        return None
    count = sum(
        1 for i, item in enumerate(instance)
        if validate(node.schema, item, instance_location.child(i))
    )
    if count == 0:
        return None, "No matching entry"
    if node.min_contains is not None and count < node.min_contains:
        return "minContains", f"Matching entry minimum {node.min_contains}, was {count}"
    if node.max_contains is not None and count > node.max_contains:
        return "maxContains", f"Matching entry maximum {node.max_contains}, was {count}"
    return None


def _sibling(pointer: Pointer, keyword: str) -> Pointer:
    return (pointer if pointer.is_root else pointer.parent()).child(keyword)


@validate.register
def _(node: n.ContainsConstraint, instance, instance_location=ROOT):
    return _contains_problem(node, instance, instance_location) is None


@validate_basic.register
def _(node: n.ContainsConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    problem = _contains_problem(node, instance, instance_location)
    if problem is None:
        return BasicOutput.TRUE
    sibling, message = problem
    if sibling is None:
        return BasicOutput.failure([_entry(node, relative_location, instance_location, message)])
    absolute = node.absolute_location_of(_sibling(node.schema_path, sibling))
    return BasicOutput.failure([
        BasicErrorEntry(
            _sibling(relative_location, sibling).schema_fragment(),
            absolute,
            instance_location.schema_fragment(),
            message,
        )
    ])


@validate_detailed.register
def _(node: n.ContainsConstraint, instance, relative_location=ROOT, instance_location=ROOT):
    problem = _contains_problem(node, instance, instance_location)
    if problem is None:
        return _annotation(node, relative_location, instance_location, SUCCESS)
    return _error(node, relative_location, instance_location, problem[1])


# --------------------------------------------------------------------------- #
# Leaf constraints                                                            #
# --------------------------------------------------------------------------- #

def _type_matches(name: str, instance: Any) -> bool:
    if name == "integer":
        return is_integer(instance)
    return json_type(instance) == name


@failure.register
def _(node: n.TypeConstraint, instance):
    if any(_type_matches(t, instance) for t in node.types):
        return None
    return "Incorrect type, expected " + " or ".join(node.types)


@failure.register
def _(node: n.EnumConstraint, instance):
    if any(json_equal(instance, v) for v in node.values):
        return None
    return f"Not in enumerated values: {error_display(instance)}"


@failure.register
def _(node: n.ConstConstraint, instance):
    if json_equal(instance, node.value):
        return None
    return f"Does not match constant: {error_display(instance)}"


def _is_multiple(value, divisor) -> bool:
    if isinstance(value, int) and isinstance(divisor, int):
        return value % divisor == 0
    with decimal.localcontext() as ctx:
        ctx.prec = 200
        try:
            return Decimal(value) % Decimal(divisor) == 0
        except decimal.InvalidOperation:
            return (float(value) / float(divisor)).is_integer()


def _number_ok(kind: str, value, limit) -> bool:
    if kind == "multipleOf":
        return _is_multiple(value, limit)
    if kind == "maximum":
        return value <= limit
    if kind == "exclusiveMaximum":
        return value < limit
    if kind == "minimum":
        return value >= limit
    return value > limit


@failure.register
def _(node: n.NumberConstraint, instance):
    if not is_number(instance):
        return None
    if is_finite(instance) and _number_ok(node.kind, exact_number(instance), node.value):
        return None
    return f"Number fails check: {node.kind} {error_display(node.value)}, was {error_display(instance)}"


@failure.register
def _(node: n.StringLengthConstraint, instance):
    if not isinstance(instance, str):
        return None
    length = len(instance)
    ok = length >= node.value if node.kind == "minLength" else length <= node.value
    if ok:
        return None
    return f"String fails length check: {node.kind} {node.value}, was {length}"


@failure.register
def _(node: n.PatternConstraint, instance):
    if not isinstance(instance, str) or node.regex.search(instance):
        return None
    return f"String doesn't match pattern {node.regex.pattern} - {error_display(instance)}"


@failure.register
def _(node: n.FormatConstraint, instance):
    if node.checker.check(instance):
        return None
    return f'Value fails format check "{node.name}", was {error_display(instance)}'


@failure.register
def _(node: n.PropertiesSizeConstraint, instance):
    if not is_object(instance):
        return None
    size = len(instance)
    ok = size >= node.value if node.kind == "minProperties" else size <= node.value
    if ok:
        return None
    return f"Object fails properties count check: {node.kind} {node.value}, was {size}"


@failure.register
def _(node: n.ArraySizeConstraint, instance):
    if not is_array(instance):
        return None
    size = len(instance)
    ok = size >= node.value if node.kind == "minItems" else size <= node.value
    if ok:
        return None
    return f"Array fails number of items check: {node.kind} {node.value}, was {size}"


@failure.register
def _(node: n.UniqueItemsConstraint, instance):
    if not is_array(instance):
        return None
    for i in range(1, len(instance)):
        for j in range(i):
            if json_equal(instance[i], instance[j]):
                return "Array items not unique"
    return None


@failure.register(n.DefaultAnnotation)
@failure.register(n.ExtensionAnnotation)
def _annotation_only(node, instance):
    return None


LEAF_TYPES = (
    n.TypeConstraint,
    n.EnumConstraint,
    n.ConstConstraint,
    n.NumberConstraint,
    n.StringLengthConstraint,
    n.PatternConstraint,
    n.FormatConstraint,
    n.PropertiesSizeConstraint,
    n.ArraySizeConstraint,
    n.UniqueItemsConstraint,
    n.DefaultAnnotation,
    n.ExtensionAnnotation,
)


def _leaf_validate(node, instance, instance_location=ROOT):
    return failure(node, instance) is None


def _leaf_basic(node, instance, relative_location=ROOT, instance_location=ROOT):
    message = failure(node, instance)
    if message is None:
        return BasicOutput.TRUE
    return BasicOutput.failure([_entry(node, relative_location, instance_location, message)])


def _leaf_detailed(node, instance, relative_location=ROOT, instance_location=ROOT):
    message = failure(node, instance)
    if message is None:
        return _annotation(node, relative_location, instance_location, SUCCESS)
    return _error(node, relative_location, instance_location, message)


for _leaf in LEAF_TYPES:
    validate.register(_leaf, _leaf_validate)
    validate_basic.register(_leaf, _leaf_basic)
    validate_detailed.register(_leaf, _leaf_detailed)
