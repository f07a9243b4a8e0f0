"""
Conversion between Casbin policy rules and stored ``CasbinRule`` documents.

Rules are encoded positionally into ``v0..v5`` and given a content-addressed
id, so the same ``(ptype, rule)`` always maps to the same document. Decoding
reads the slots back in order and stops at the first empty one: a stored
document with ``v0="a", v1="", v2="b"`` decodes to ``["a"]``. Documents
written by this adapter never contain such gaps.
"""

import hashlib
import logging
from typing import List, Sequence

from casbin.model import Model

from cosmos_casbin.domain import RULE_FIELDS, CasbinRule

logger = logging.getLogger(__name__)


def policy_id(ptype: str, rule: Sequence[str]) -> str:
    """Deterministic document id for a rule.

    Hashes ``ptype`` and the rule values joined with commas. The digest is
    128 bits, hex encoded.
    """
    data = ",".join([ptype, *rule])
    return hashlib.blake2b(data.encode("utf-8"), digest_size=16).hexdigest()


def rule_to_record(ptype: str, rule: Sequence[str]) -> CasbinRule:
    """Encode a policy rule as a stored document."""
    values = {name: value for name, value in zip(RULE_FIELDS, rule)}
    return CasbinRule(id=policy_id(ptype, rule), ptype=ptype, **values)


def record_to_rule(record: CasbinRule) -> List[str]:
    """Decode the value slots of a stored document, up to the first empty one."""
    tokens: List[str] = []
    for value in record.values():
        if value == "":
            break
        tokens.append(value)
    return tokens


def load_policy_record(record: CasbinRule, model: Model) -> None:
    """Add the rule held by ``record`` to the matching model section.

    The section is the first character of the policy type (``g2`` goes to
    ``g``). Records that decode to nothing, or whose policy type is not
    defined by the model, are skipped.
    """
    tokens = record_to_rule(record)
    if not tokens:
        logger.debug(
            "Skipping stored rule with no values",
            extra={"policy_id": record.id, "ptype": record.ptype},
        )
        return

    key = record.ptype
    sec = key[:1]
    if sec not in model.model or key not in model.model[sec]:
        logger.warning(
            "Skipping stored rule with a policy type unknown to the model",
            extra={"policy_id": record.id, "ptype": key},
        )
        return

    model.model[sec][key].policy.append(tokens)
