# priority.py — turns link counters into sitemap priority / changefreq
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Mapping

from linkgraph import LinkNode
from matcher import Matcher


@dataclass(frozen=True)
class ResultRecord:
    change_freq: str
    priority: float


@dataclass
class PathRules:
    """Compiled primary / normal / secondary matchers (any may be None)."""

    primary: Matcher | None = None
    normal: Matcher | None = None
    secondary: Matcher | None = None


def change_freq(priority: float) -> str:
    if priority == 1:
        return "always"
    if priority >= 0.8:
        return "hourly"
    if priority >= 0.6:
        return "daily"
    if priority >= 0.5:
        return "weekly"
    if priority >= 0.3:
        return "monthly"
    if priority > 0:
        return "yearly"
    return "never"


def priority_for(url: str, node: LinkNode, root: str, rules: PathRules) -> float:
    """
    root / primary → 1.0, secondary → 0.0, otherwise log10(incoming / outgoing)
    clamped to [0, 1] with a 0.5 floor for normal paths.
    """
    if url == root or (rules.primary and rules.primary.matches(url)):
        return 1.0
    if rules.secondary and rules.secondary.matches(url):
        return 0.0

    outgoing = node.outgoing or 1
    raw = math.log10(node.incoming / outgoing) if node.incoming > 0 else -math.inf

    if raw < 0.5 and rules.normal and rules.normal.matches(url):
        return 0.5

    return round(min(max(raw, 0.0), 1.0), 1)


def classify(nodes: Mapping[str, LinkNode], root: str, rules: PathRules) -> Dict[str, ResultRecord]:
    """Score every node. Does not touch `nodes`; output is sorted."""
    out: Dict[str, ResultRecord] = {}
    for url, node in nodes.items():
        p = priority_for(url, node, root, rules)
        out[url] = ResultRecord(change_freq(p), p)
    return sort_results(out)


def additional_entry(priority: float) -> ResultRecord:
    return ResultRecord(change_freq(priority), priority)


def merge_additional(results: Dict[str, ResultRecord],
                     additional: Mapping[str, ResultRecord]) -> Dict[str, ResultRecord]:
    """Add externally supplied entries; organic scores always win."""
    merged = dict(results)
    for url, record in additional.items():
        if url not in merged:
            merged[url] = record
    return merged


def sort_results(results: Mapping[str, ResultRecord]) -> Dict[str, ResultRecord]:
    # sorted() is stable, so ties keep discovery order
    return dict(sorted(results.items(), key=lambda kv: -kv[1].priority))
