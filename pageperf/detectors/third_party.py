"""Third-party scripts: count, weight, slow loads and redundant vendors."""

from __future__ import annotations

from pageperf.detectors.base import KB, make_bottleneck, missing_input, tiered
from pageperf.models.types import Bottleneck, BottleneckCategory, ResourceType, Severity
from pageperf.utils.resources import filter_by_type, format_size, is_third_party, main_domain, total_size


EVALUATE_TIP = ("Evaluate the necessity of each third-party script and remove unnecessary ones.",
                "https://web.dev/articles/efficiently-load-third-party-javascript")
ASYNC_TIP = ("Load third-party scripts asynchronously or defer their loading.",
             "https://web.dev/articles/efficiently-load-third-party-javascript")
HINTS_TIP = ("Use resource hints like dns-prefetch and preconnect for third-party domains.",
             "https://web.dev/articles/preconnect-and-dns-prefetch")
THIRD_PARTY_GUIDE = "https://web.dev/articles/efficiently-load-third-party-javascript"

# Checked in order; the first group with a matching keyword wins.
SCRIPT_GROUPS: dict[str, tuple[str, ...]] = {
    "analytics": ("google-analytics", "analytics", "gtm", "segment", "mixpanel", "hotjar"),
    "advertising": ("adsense", "adwords", "doubleclick", "advertising", "ads"),
    "social": ("facebook", "twitter", "linkedin", "instagram", "pinterest", "social"),
    "chat": ("intercom", "drift", "zendesk", "livechat", "chat"),
    "marketing": ("hubspot", "marketo", "mailchimp", "marketing"),
}
OTHER_GROUP = "other"


def script_group(url: str | None) -> str:
    if not url:
        return OTHER_GROUP
    lowered = url.lower()
    for group, keywords in SCRIPT_GROUPS.items():
        if any(keyword in lowered for keyword in keywords):
            return group
    return OTHER_GROUP


def group_scripts(scripts) -> dict[str, list]:
    grouped: dict[str, list] = {group: [] for group in SCRIPT_GROUPS}
    grouped[OTHER_GROUP] = []
    for script in scripts:
        grouped[script_group(script.url)].append(script)
    return grouped


class ThirdPartyScriptsDetector:

    name = "third_party_scripts"
    category = BottleneckCategory.THIRD_PARTY_SCRIPTS

    THRESHOLDS = {
        "count": {"high": 10, "medium": 5},
        "size": {"high": 500 * KB, "medium": 250 * KB},
        "load_ms": 500,
        "group_count": 3,
    }

    def detect(self, metrics, resources) -> list[Bottleneck]:
        if missing_input(metrics, resources):
            return []

        domain = main_domain(resources)
        if not domain:
            return []

        scripts = [
            r for r in filter_by_type(resources, ResourceType.SCRIPT)
            if is_third_party(r, domain)
        ]
        if not scripts:
            return []

        findings = []

        # 1. Script count
        limits = self.THRESHOLDS["count"]
        severity = tiered(len(scripts), limits["high"], limits["medium"])
        if severity:
            findings.append(make_bottleneck(
                self.category,
                "Too Many Third-Party Scripts",
                f"The page loads {len(scripts)} third-party scripts, which can significantly "
                "impact performance, privacy, and security.",
                severity,
                scripts,
                [EVALUATE_TIP,
                 ("Consolidate third-party scripts from the same provider.", THIRD_PARTY_GUIDE),
                 ASYNC_TIP,
                 ("Consider using tag management systems to better control third-party scripts.",
                  THIRD_PARTY_GUIDE)],
            ))

        # 2. Total weight
        size = total_size(scripts)
        limits = self.THRESHOLDS["size"]
        severity = tiered(size, limits["high"], limits["medium"])
        if severity is Severity.HIGH:
            findings.append(make_bottleneck(
                self.category,
                "Large Third-Party Scripts",
                f"The total size of third-party scripts is {format_size(size)}, which "
                "significantly impacts page load performance.",
                severity,
                scripts,
                [EVALUATE_TIP, ASYNC_TIP, HINTS_TIP,
                 ("Consider self-hosting critical third-party scripts for better control.",
                  THIRD_PARTY_GUIDE)],
            ))
        elif severity is Severity.MEDIUM:
            findings.append(make_bottleneck(
                self.category,
                "Moderate Third-Party Scripts Size",
                f"The total size of third-party scripts is {format_size(size)}, which "
                "impacts page load performance.",
                severity,
                scripts,
                [EVALUATE_TIP, ASYNC_TIP, HINTS_TIP],
            ))

        # 3. Slow loads
        load_limit = self.THRESHOLDS["load_ms"]
        slow = [r for r in scripts if (r.timing_breakdown.total or 0) > load_limit]
        if slow:
            findings.append(make_bottleneck(
                self.category,
                "Slow-Loading Third-Party Scripts",
                f"{len(slow)} third-party scripts take more than {load_limit}ms to load, "
                "which significantly impacts page performance.",
                Severity.HIGH,
                slow,
                [("Evaluate the necessity of these slow-loading scripts and consider alternatives.",
                  THIRD_PARTY_GUIDE),
                 ("Load these scripts asynchronously or defer their loading.", THIRD_PARTY_GUIDE),
                 ("Use resource hints like preconnect for these third-party domains.",
                  "https://web.dev/articles/preconnect-and-dns-prefetch"),
                 ("Consider lazy loading these scripts only when needed.", THIRD_PARTY_GUIDE)],
            ))

        # 4. Several vendors of the same kind
        for group, members in group_scripts(scripts).items():
            if group == OTHER_GROUP or len(members) <= self.THRESHOLDS["group_count"]:
                continue
            findings.append(make_bottleneck(
                self.category,
                f"Multiple {group.capitalize()} Scripts",
                f"The page loads {len(members)} different {group} scripts, which may be "
                "redundant and impact performance.",
                Severity.MEDIUM,
                members,
                [(f"Evaluate the necessity of multiple {group} scripts and consolidate where possible.",
                  THIRD_PARTY_GUIDE),
                 ("Consider using a tag management system to better control these scripts.",
                  THIRD_PARTY_GUIDE),
                 (f"Load non-critical {group} scripts asynchronously or defer their loading.",
                  THIRD_PARTY_GUIDE)],
            ))

        return findings
