"""
Benchmark Runner — Precision/Recall/F1 per Verdict

Runs the calibration corpus through the classifier and compares its
verdicts against human labels. Produces:

  1. Per-verdict precision, recall, F1 (one verdict vs. the rest)
  2. Overall accuracy and per-channel accuracy
  3. A confusion matrix (expected x actual)
  4. Misclassified samples with the rules that fired, for manual review

Vocabulary and threshold changes are tuned against this report.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from kaizen.classifier import Channel, InputClassifier, Verdict, classifier as default_classifier
from calibration.corpus_parser import CalibrationSample, parse_all_corpora


@dataclass
class VerdictMetrics:
    """Precision/recall metrics for a single verdict."""
    verdict: Verdict
    true_positives: int = 0   # Classifier said it, human said it
    false_positives: int = 0  # Classifier said it, human said something else
    false_negatives: int = 0  # Human said it, classifier said something else

    @property
    def precision(self) -> float:
        denom = self.true_positives + self.false_positives
        return self.true_positives / denom if denom > 0 else 0.0

    @property
    def recall(self) -> float:
        denom = self.true_positives + self.false_negatives
        return self.true_positives / denom if denom > 0 else 0.0

    @property
    def f1(self) -> float:
        p, r = self.precision, self.recall
        return 2 * p * r / (p + r) if (p + r) > 0 else 0.0

    @property
    def support(self) -> int:
        """Number of human-labeled samples with this verdict."""
        return self.true_positives + self.false_negatives


@dataclass
class BenchmarkResult:
    """Full benchmark output."""
    total_samples: int
    correct: int
    verdict_metrics: dict[Verdict, VerdictMetrics]
    # expected verdict -> actual verdict -> count
    confusion: dict[str, dict[str, int]]
    channel_accuracy: dict[str, float]
    overall_accuracy: float
    macro_f1: float
    misclassified: list[dict] = field(default_factory=list)


def run_benchmark(
    corpus_dir: str | Path = "calibration/corpus",
    classifier: Optional[InputClassifier] = None,
    samples: Optional[list[CalibrationSample]] = None,
) -> BenchmarkResult:
    """
    Run the calibration benchmark.

    Args:
        corpus_dir: Directory of corpus .txt files. Ignored if samples given.
        classifier: Classifier to evaluate. Defaults to the shared instance.
        samples: Pre-parsed samples.

    Raises:
        ValueError: if there are no samples.
    """
    classifier = classifier or default_classifier
    if samples is None:
        samples = parse_all_corpora(corpus_dir)
    if not samples:
        raise ValueError(f"No samples found in {corpus_dir}")

    metrics = {v: VerdictMetrics(verdict=v) for v in Verdict}
    confusion = {e.value: {a.value: 0 for a in Verdict} for e in Verdict}
    per_channel: dict[str, list[int]] = {c.value: [0, 0] for c in Channel}
    misclassified = []

    for sample in samples:
        sample.actual = classifier.classify(sample.channel, sample.text)
        confusion[sample.expected.value][sample.actual.value] += 1
        per_channel[sample.channel.value][1] += 1

        if sample.correct:
            metrics[sample.expected].true_positives += 1
            per_channel[sample.channel.value][0] += 1
            continue

        metrics[sample.expected].false_negatives += 1
        metrics[sample.actual].false_positives += 1
        evidence = classifier.explain(sample.channel, sample.text)
        misclassified.append({
            "channel": sample.channel.value,
            "expected": sample.expected.value,
            "actual": sample.actual.value,
            "text": sample.text[:200],
            "source": sample.source,
            "notes": sample.notes,
            "gibberish_rules": evidence["gibberish_rules"],
            "injection_triggers": evidence["injection_triggers"],
        })

    correct = sum(1 for s in samples if s.correct)
    active = [m for m in metrics.values() if m.support > 0]
    macro_f1 = sum(m.f1 for m in active) / len(active) if active else 0.0

    return BenchmarkResult(
        total_samples=len(samples),
        correct=correct,
        verdict_metrics=metrics,
        confusion=confusion,
        channel_accuracy={
            ch: round(hit / total, 4)
            for ch, (hit, total) in per_channel.items() if total
        },
        overall_accuracy=round(correct / len(samples), 4),
        macro_f1=round(macro_f1, 4),
        misclassified=misclassified,
    )


def format_report(result: BenchmarkResult) -> str:
    """Format benchmark results as a human-readable report."""
    lines = [
        "=" * 60,
        "KAIZEN CLASSIFIER CALIBRATION REPORT",
        "=" * 60,
        "",
        f"Samples: {result.total_samples} ({result.correct} correct)",
        "",
        "--- OVERALL METRICS ---",
        f"Accuracy:  {result.overall_accuracy:.1%}",
        f"Macro F1:  {result.macro_f1:.1%}",
        "",
        "--- PER-CHANNEL ACCURACY ---",
    ]
    for ch, acc in result.channel_accuracy.items():
        lines.append(f"{ch:<18} {acc:.1%}")

    lines.extend([
        "",
        "--- PER-VERDICT BREAKDOWN ---",
        f"{'Verdict':<12} {'Prec':>6} {'Recall':>6} {'F1':>6} {'TP':>4} {'FP':>4} {'FN':>4} {'Support':>7}",
        "-" * 60,
    ])
    for m in sorted(result.verdict_metrics.values(), key=lambda m: (-m.support, -m.f1)):
        if m.support > 0 or m.false_positives > 0:
            lines.append(
                f"{m.verdict.value:<12} {m.precision:>5.0%} {m.recall:>6.0%} "
                f"{m.f1:>5.0%} {m.true_positives:>4} {m.false_positives:>4} "
                f"{m.false_negatives:>4} {m.support:>7}"
            )

    verdicts = [v.value for v in Verdict]
    lines.extend([
        "",
        "--- CONFUSION MATRIX (rows: expected, cols: actual) ---",
        f"{'':<12}" + "".join(f"{v[:9]:>10}" for v in verdicts),
    ])
    for expected in verdicts:
        row = result.confusion[expected]
        if sum(row.values()) == 0:
            continue
        lines.append(f"{expected:<12}" + "".join(f"{row[a]:>10}" for a in verdicts))

    if result.misclassified:
        lines.extend(["", "--- MISCLASSIFIED ---"])
        for miss in result.misclassified[:20]:
            lines.append(
                f"  [{miss['channel']}] expected {miss['expected']}, "
                f"got {miss['actual']}: {miss['text'][:70]}"
            )
            rules = miss["gibberish_rules"] + miss["injection_triggers"]
            if rules:
                lines.append(f"    Fired: {', '.join(rules)}")
            if miss.get("notes"):
                lines.append(f"    Notes: {miss['notes']}")

    lines.extend(["", "=" * 60])
    return "\n".join(lines)


def to_json(result: BenchmarkResult) -> dict:
    """Machine-readable form of a benchmark result."""
    return {
        "total_samples": result.total_samples,
        "correct": result.correct,
        "overall": {
            "accuracy": result.overall_accuracy,
            "macro_f1": result.macro_f1,
        },
        "per_channel": result.channel_accuracy,
        "per_verdict": {
            v.value: {
                "precision": round(m.precision, 4),
                "recall": round(m.recall, 4),
                "f1": round(m.f1, 4),
                "tp": m.true_positives,
                "fp": m.false_positives,
                "fn": m.false_negatives,
                "support": m.support,
            }
            for v, m in result.verdict_metrics.items()
            if m.support > 0 or m.false_positives > 0
        },
        "confusion": result.confusion,
        "misclassified": result.misclassified,
    }


def save_report(result: BenchmarkResult, output_dir: str | Path = "calibration/reports"):
    """Save benchmark results as both human-readable report and JSON."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    report_path = output_dir / "calibration_report.txt"
    report_path.write_text(format_report(result), encoding="utf-8")

    json_path = output_dir / "calibration_report.json"
    json_path.write_text(json.dumps(to_json(result), indent=2), encoding="utf-8")

    return report_path, json_path
