"""Performance benchmarking for round-trip validation.

This module measures how long exhaustive validation takes and how much memory
it uses on representative documents, including a signed SAML response of the
kind the validator is meant to protect.
"""

import gc
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import psutil

from xml_roundtrip_validator.shared.config import ValidatorConfig
from xml_roundtrip_validator.shared.logging import get_logger

from .validator import RoundtripValidator, ScanState

SAML_RESPONSE = (
    '<samlp:Response xmlns:samlp="urn:oasis:names:tc:SAML:2.0:protocol" xmlns'
    ':dsig="http://www.w3.org/2000/09/xmldsig#" xmlns:enc="http://www.w3.org/'
    '2001/04/xmlenc#" xmlns:saml="urn:oasis:names:tc:SAML:2.0:assertion" xmln'
    's:x500="urn:oasis:names:tc:SAML:2.0:profiles:attribute:X500" xmlns:xsi="'
    'http://www.w3.org/2001/XMLSchema-instance" Destination="http://127.0.0.1'
    ':5556/callback" ID="id-IWlPTptSB-PlR80dwt8ZhVeG70mrz7nPvTVrhduK" InRespo'
    'nseTo="_e66b3a98-831c-4c96-5706-b63fe0549624" IssueInstant="2016-12-12T1'
    '6:54:35Z" Version="2.0"><saml:Issuer Format="urn:oasis:names:tc:SAML:2.0'
    ':nameid-format:entity">https://deaoam-dev02.jpl.nasa.gov:14101/oam/fed</'
    'saml:Issuer><samlp:Status><samlp:StatusCode Value="urn:oasis:names:tc:SA'
    'ML:2.0:status:Success"/></samlp:Status><saml:Assertion ID="id-rT9rTqxdQC'
    '9j34YhVeNayUWC9EbIBgym6gp-MZt-" IssueInstant="2016-12-12T16:54:35Z" Vers'
    'ion="2.0"><saml:Issuer Format="urn:oasis:names:tc:SAML:2.0:nameid-format'
    ':entity">https://deaoam-dev02.jpl.nasa.gov:14101/oam/fed</saml:Issuer><d'
    'sig:Signature><dsig:SignedInfo><dsig:CanonicalizationMethod Algorithm="h'
    'ttp://www.w3.org/2001/10/xml-exc-c14n#"/><dsig:SignatureMethod Algorithm'
    '="http://www.w3.org/2000/09/xmldsig#rsa-sha1"/><dsig:Reference URI="#id-'
    'rT9rTqxdQC9j34YhVeNayUWC9EbIBgym6gp-MZt-"><dsig:Transforms><dsig:Transfo'
    'rm Algorithm="http://www.w3.org/2000/09/xmldsig#enveloped-signature"/><d'
    'sig:Transform Algorithm="http://www.w3.org/2001/10/xml-exc-c14n#"/></dsi'
    'g:Transforms><dsig:DigestMethod Algorithm="http://www.w3.org/2000/09/xml'
    'dsig#sha1"/><dsig:DigestValue>z1HD/59hv6UOd5+jeG+ihaFWLgI=</dsig:DigestV'
    'alue></dsig:Reference></dsig:SignedInfo><dsig:SignatureValue>I99oG5kiOfI'
    'gbXYa21z/TOmzftTkFnXe9ObhBNSKit9kAhT93apYROqqXv4Ax96P144Ld7ERX1hgJsytK8L'
    'C2874Pk7QrSNm4zvW3x0D4GR4lM06CvJK/EhIur3TrCUJDPigvyP7TJitheCyBejwt0x0lqN'
    'P/OzR3tMbAIMRoho=</dsig:SignatureValue></dsig:Signature><saml:Subject><s'
    'aml:NameID Format="urn:oasis:names:tc:SAML:2.0:nameid-format:persistent"'
    ' NameQualifier="https://deaoam-dev02.jpl.nasa.gov:14101/oam/fed" SPNameQ'
    'ualifier="JSAuth">pkieu</saml:NameID><saml:SubjectConfirmation Method="u'
    'rn:oasis:names:tc:SAML:2.0:cm:bearer"><saml:SubjectConfirmationData InRe'
    'sponseTo="_e66b3a98-831c-4c96-5706-b63fe0549624" NotOnOrAfter="2016-12-1'
    '2T16:59:35Z" Recipient="http://127.0.0.1:5556/callback"/></saml:SubjectC'
    'onfirmation></saml:Subject><saml:Conditions NotBefore="2016-12-12T16:54:'
    '35Z" NotOnOrAfter="2016-12-12T16:59:35Z"><saml:AudienceRestriction><saml'
    ':Audience>JSAuth</saml:Audience></saml:AudienceRestriction></saml:Condit'
    'ions><saml:AuthnStatement AuthnInstant="2016-12-12T16:54:10Z" SessionInd'
    'ex="id-l3NCbxKoBfUZcuKhlotMuIF3ydgYJgGGG6BGTTU6" SessionNotOnOrAfter="20'
    '16-12-12T17:54:35Z"><saml:AuthnContext><saml:AuthnContextClassRef>urn:oa'
    'sis:names:tc:SAML:2.0:ac:classes:PasswordProtectedTransport</saml:AuthnC'
    'ontextClassRef></saml:AuthnContext></saml:AuthnStatement></saml:Assertio'
    'n></samlp:Response>'
)


@dataclass
class BenchmarkResult:
    """Result of a single benchmark run."""

    test_case: str
    processing_time_ms: float
    memory_used_mb: float
    bytes_processed: int
    tokens_scanned: int
    findings: int
    success: bool
    error_message: Optional[str] = None

    @property
    def bytes_per_second(self) -> float:
        """Calculate bytes validated per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_processed * 1000.0) / self.processing_time_ms

    @property
    def tokens_per_second(self) -> float:
        """Calculate tokens checked per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.tokens_scanned * 1000.0) / self.processing_time_ms


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results with statistical analysis."""

    results: List[BenchmarkResult] = field(default_factory=list)
    suite_name: str = "Round-trip Validation Benchmark"
    timestamp: float = field(default_factory=time.time)

    def add_result(self, result: BenchmarkResult) -> None:
        """Add a benchmark result to the suite."""
        self.results.append(result)

    def get_results_by_test_case(self, test_case: str) -> List[BenchmarkResult]:
        """Get all results for a specific test case."""
        return [r for r in self.results if r.test_case == test_case]

    def get_statistics(self, test_case: str, metric: str) -> Dict[str, float]:
        """Get statistical analysis of one metric for a test case.

        Args:
            test_case: Name of the benchmarked document
            metric: One of processing_time_ms, memory_used_mb,
                bytes_per_second or tokens_per_second

        Returns:
            min/max/mean/median/stdev/count, or an empty dict if there is no data
        """
        values = [
            getattr(r, metric)
            for r in self.get_results_by_test_case(test_case)
            if r.success and hasattr(r, metric)
        ]
        if not values:
            return {}

        return {
            "min": min(values),
            "max": max(values),
            "mean": statistics.mean(values),
            "median": statistics.median(values),
            "stdev": statistics.stdev(values) if len(values) > 1 else 0.0,
            "count": len(values)
        }

    def generate_report(self) -> Dict[str, Any]:
        """Generate benchmark report."""
        test_cases = sorted(set(r.test_case for r in self.results))

        report: Dict[str, Any] = {
            "suite_name": self.suite_name,
            "timestamp": self.timestamp,
            "total_results": len(self.results),
            "test_cases": test_cases,
            "summary": {}
        }

        for test_case in test_cases:
            case_results = self.get_results_by_test_case(test_case)
            successful = [r for r in case_results if r.success]
            report["summary"][test_case] = {
                "total_runs": len(case_results),
                "successful_runs": len(successful),
                "findings": case_results[0].findings,
                "time": self.get_statistics(test_case, "processing_time_ms"),
                "throughput": self.get_statistics(test_case, "bytes_per_second"),
                "memory": self.get_statistics(test_case, "memory_used_mb")
            }

        return report


class ValidationBenchmark:
    """Benchmark exhaustive validation over a set of named documents."""

    def __init__(
        self,
        config: Optional[ValidatorConfig] = None,
        warmup_runs: int = 3,
        benchmark_runs: int = 10,
        test_cases: Optional[Dict[str, bytes]] = None
    ) -> None:
        """Initialize benchmark.

        Args:
            config: Validator configuration used for every run
            warmup_runs: Number of warmup runs before benchmarking
            benchmark_runs: Number of timed runs per document
            test_cases: Documents to benchmark; defaults to the built-in set
        """
        if warmup_runs < 0:
            raise ValueError("warmup_runs must be >= 0")
        if benchmark_runs < 1:
            raise ValueError("benchmark_runs must be >= 1")

        self.config = config or ValidatorConfig.default()
        self.warmup_runs = warmup_runs
        self.benchmark_runs = benchmark_runs
        self.validator = RoundtripValidator(self.config)
        self.logger = get_logger(__name__, self.config.correlation_id, "benchmark")
        self.test_cases = test_cases if test_cases is not None else self._create_test_cases()

    def _create_test_cases(self) -> Dict[str, bytes]:
        return {
            "saml_response": SAML_RESPONSE.encode("utf-8"),
            "small_well_formed": b'''<?xml version="1.0" encoding="UTF-8"?>
<root>
    <element attr="value">Content</element>
    <empty/>
    <!-- Comment -->
</root>''',
            "unstable_constructs": b'''<Root>
    <! <<!-- -->!-- x --> y>
    <Element ::attr="foo"></x::Element>
    <x::Other/>
</Root>''',
            "large_well_formed": self._generate_large_xml(),
        }

    def _generate_large_xml(self) -> bytes:
        elements = ['<?xml version="1.0" encoding="UTF-8"?>', '<large_document>']

        for i in range(1000):
            elements.append(f'''
    <item id="{i}" category="test" priority="{i % 10}">
        <title>Item {i}</title>
        <description>Description &amp; notes for item {i}.</description>
        <data value1="{i}" value2="{i * 2}" value3="{i * 3}"/>
        <![CDATA[raw <content> for item {i}]]>
    </item>''')

        elements.append('</large_document>')
        return '\n'.join(elements).encode("utf-8")

    def _measure_memory_usage(self) -> float:
        """Get current memory usage in MB."""
        process = psutil.Process()
        return process.memory_info().rss / 1024 / 1024

    def _benchmark_document(self, test_case: str, document: bytes) -> BenchmarkResult:
        gc.collect()
        memory_before = self._measure_memory_usage()
        start_time = time.perf_counter()

        result = self.validator.scan(document)

        processing_time = (time.perf_counter() - start_time) * 1000
        memory_used = max(0.0, self._measure_memory_usage() - memory_before)

        return BenchmarkResult(
            test_case=test_case,
            processing_time_ms=processing_time,
            memory_used_mb=memory_used,
            bytes_processed=result.bytes_scanned,
            tokens_scanned=result.tokens_scanned,
            findings=result.finding_count,
            success=result.state == ScanState.FINISHED,
            error_message=None if result.state == ScanState.FINISHED else str(result.findings[-1])
        )

    def run_benchmark(self) -> BenchmarkSuite:
        """Run the benchmark over every test case.

        Returns:
            BenchmarkSuite holding one result per timed run
        """
        suite = BenchmarkSuite()

        self.logger.info(
            "Starting benchmark suite",
            extra={
                "test_cases": len(self.test_cases),
                "warmup_runs": self.warmup_runs,
                "benchmark_runs": self.benchmark_runs
            }
        )

        for test_case, document in self.test_cases.items():
            self.logger.debug(f"Benchmarking test case: {test_case}")

            for _ in range(self.warmup_runs):
                self.validator.scan(document)

            for _ in range(self.benchmark_runs):
                suite.add_result(self._benchmark_document(test_case, document))

        self.logger.info(
            "Benchmark suite completed",
            extra={
                "total_results": len(suite.results),
                "suite_duration_seconds": time.time() - suite.timestamp
            }
        )

        return suite
