"""Inefficient JavaScript: main-thread blocking time and script counts."""

from __future__ import annotations

from pageperf.detectors.base import make_bottleneck, missing_input, tiered
from pageperf.models.types import Bottleneck, BottleneckCategory, ResourceType, Severity
from pageperf.utils.resources import filter_by_type, is_third_party, main_domain


LONG_TASKS_TIP = ("Break up long tasks into smaller, asynchronous tasks.",
                  "https://web.dev/articles/optimize-long-tasks")
UNUSED_CODE_TIP = ("Reduce JavaScript execution time by removing unused code.",
                   "https://web.dev/articles/remove-unused-code")
DEFER_TIP = ("Defer or lazy load non-critical JavaScript.",
             "https://web.dev/articles/efficiently-load-third-party-javascript")


class JavaScriptDetector:

    name = "javascript"
    category = BottleneckCategory.INEFFICIENT_JAVASCRIPT

    THRESHOLDS = {
        "tbt_ms": {"high": 300, "medium": 100},
        "script_count": 15,
        "third_party_count": 5,
    }

    def detect(self, metrics, resources) -> list[Bottleneck]:
        if missing_input(metrics, resources):
            return []

        findings = []

        # 1. Total Blocking Time
        tbt = metrics.total_blocking_time
        if tbt:
            limits = self.THRESHOLDS["tbt_ms"]
            severity = tiered(tbt, limits["high"], limits["medium"])
            if severity is Severity.HIGH:
                findings.append(make_bottleneck(
                    self.category,
                    "High JavaScript Execution Time",
                    f"The page has a Total Blocking Time of {round(tbt)}ms, which "
                    "significantly impacts interactivity.",
                    severity,
                    [],
                    [LONG_TASKS_TIP, UNUSED_CODE_TIP, DEFER_TIP,
                     ("Use web workers for CPU-intensive tasks to avoid blocking the main thread.",
                      "https://web.dev/articles/off-main-thread")],
                ))
            elif severity is Severity.MEDIUM:
                findings.append(make_bottleneck(
                    self.category,
                    "Moderate JavaScript Execution Time",
                    f"The page has a Total Blocking Time of {round(tbt)}ms, which impacts "
                    "interactivity.",
                    severity,
                    [],
                    [LONG_TASKS_TIP, UNUSED_CODE_TIP, DEFER_TIP],
                ))

        scripts = filter_by_type(resources, ResourceType.SCRIPT)
        if not scripts:
            return findings

        # 2. Script count
        if len(scripts) > self.THRESHOLDS["script_count"]:
            findings.append(make_bottleneck(
                self.category,
                "Too Many JavaScript Files",
                f"The page loads {len(scripts)} JavaScript files, which can increase HTTP "
                "requests and parsing time.",
                Severity.MEDIUM,
                scripts,
                [("Consolidate JavaScript files to reduce HTTP requests.",
                  "https://web.dev/articles/reduce-network-payloads-using-text-compression"),
                 ("Use module bundlers like Webpack or Rollup to combine scripts.",
                  "https://web.dev/articles/commonjs-larger-bundles"),
                 ("Implement code splitting to load only necessary JavaScript.",
                  "https://web.dev/articles/reduce-javascript-payloads-with-code-splitting")],
            ))

        # 3. Third-party script count. Overlaps with ThirdPartyScriptsDetector on purpose.
        domain = main_domain(resources)
        third_party = [r for r in scripts if is_third_party(r, domain)]
        if len(third_party) > self.THRESHOLDS["third_party_count"]:
            findings.append(make_bottleneck(
                self.category,
                "Too Many Third-Party Scripts",
                f"The page loads {len(third_party)} third-party scripts, which can impact "
                "performance and security.",
                Severity.MEDIUM,
                third_party,
                [("Evaluate the necessity of each third-party script and remove unnecessary ones.",
                  "https://web.dev/articles/efficiently-load-third-party-javascript"),
                 ("Load third-party scripts asynchronously or defer their loading.",
                  "https://web.dev/articles/efficiently-load-third-party-javascript"),
                 ("Use resource hints like dns-prefetch and preconnect for third-party domains.",
                  "https://web.dev/articles/preconnect-and-dns-prefetch"),
                 ("Consider self-hosting critical third-party scripts for better control.",
                  "https://web.dev/articles/efficiently-load-third-party-javascript")],
            ))

        return findings
