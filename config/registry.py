"""
Collections managed by the console.

Each entry pairs an API endpoint with the schema used for its forms and CSV
imports. Field rules mirror what the reporting API accepts.
"""
from datetime import datetime
from typing import Dict, List

from core.resources import CollectionDefinition
from core.table_state import SortConfig
from core.validation import FieldSpec as F, RowSchema

# Business units used as a categorical dimension across reports
BU_LIST = [
    "HO/DR", "CWC", "RAMAT", "EFS", "ETS", "Alrashed Food", "Alrashed Tires",
    "Jana Marine / Tanajib", "Industrials (Steel, Fast)", "Alrashed Wood",
    "Admirals", "YAUMI", "BMD", "Saudi Filter", "cement", "Insuwrap", "EFS/ETS",
    "Ubmksa", "Polystyrene",
]

SEVERITIES = ["low", "medium", "high", "critical"]
INCIDENT_STATUSES = ["unresolved", "investigating", "resolved"]
IOC_TYPES = ["ip", "domain", "url", "hash", "email", "other"]
THREAT_TYPES = ["malware", "phishing", "ransomware", "apt", "ddos", "other"]

_CURRENT_YEAR = datetime.now().year
_DOMAIN_PATTERN = r"(?i)([a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,}"

GROUP_ASSETS = "Assets"
GROUP_THREAT_INTEL = "Threat Intelligence"
GROUP_EXECUTIVE = "Executive Dashboard"
GROUP_BU_SECURITY = "Business Units Security"
GROUP_COMPLIANCE = "Cybersecurity Compliance"
GROUP_BREACH = "Security Breach Indicators"
GROUP_UBA = "User Behavior Analytics"


def _period(quarter: bool = False) -> List[F]:
    fields = [
        F("month", "month"),
        F("year", "int", min_value=2000, max_value=_CURRENT_YEAR + 5),
    ]
    if quarter:
        fields.append(F("quarter", "int", min_value=1, max_value=4))
    return fields


COLLECTIONS: List[CollectionDefinition] = [
    # -- Assets ---------------------------------------------------------------
    CollectionDefinition(
        key="ips", label="IP Assets", group=GROUP_ASSETS,
        endpoint="/assets/ips", noun="IP entries",
        schema=RowSchema([
            F("value", "ip", label="IP Address"),
            F("location"),
            F("description", required=False),
        ], unique_together=("value",)),
        default_sort=SortConfig("value"), page_size=5,
    ),
    CollectionDefinition(
        key="domains", label="Domains", group=GROUP_ASSETS,
        endpoint="/assets/domains", noun="domain entries",
        schema=RowSchema([
            F("value", pattern=_DOMAIN_PATTERN, label="Domain"),
            F("location"),
            F("description", required=False),
        ], unique_together=("value",)),
        default_sort=SortConfig("value"), page_size=5,
    ),
    CollectionDefinition(
        key="attack_surface", label="Attack Surface", group=GROUP_ASSETS,
        endpoint="/attack-surface", noun="attack surface entries",
        schema=RowSchema([
            F("detectionTime", "date"),
            F("affectedSystems"),
            F("services"),
            F("mitigationSteps", required=False),
            F("status", "choice", choices=INCIDENT_STATUSES, default="unresolved"),
            F("screenshot", required=False),
            F("sampleFile", required=False),
        ]),
        default_sort=SortConfig("detectionTime", "desc"),
        attachments={"screenshot": "screenshots", "sampleFile": "sample-files"},
    ),

    # -- Threat intelligence --------------------------------------------------
    CollectionDefinition(
        key="iocs", label="Indicators of Compromise", group=GROUP_THREAT_INTEL,
        endpoint="/threat-intelligence/iocs", noun="IOC entries",
        schema=RowSchema([
            F("iOCType", "choice", choices=IOC_TYPES, label="IOC Type"),
            F("indicatorValue"),
            F("threatType", "choice", choices=THREAT_TYPES),
            F("source"),
            F("description"),
            F("time", "date"),
        ], unique_together=("iOCType", "indicatorValue")),
        default_sort=SortConfig("time", "desc"),
    ),
    CollectionDefinition(
        key="suspicious_ips", label="Suspicious IPs", group=GROUP_THREAT_INTEL,
        endpoint="/threat-intelligence/suspicious-ips", noun="suspicious IPs",
        schema=RowSchema([
            F("value", "ip", label="IP Address"),
            F("source"),
            F("description"),
            F("time", "date"),
        ], unique_together=("value",)),
        default_sort=SortConfig("time", "desc"),
    ),
    CollectionDefinition(
        key="threat_news", label="Threat News", group=GROUP_THREAT_INTEL,
        endpoint="/threat-intelligence/threat-news", noun="threat news items",
        schema=RowSchema([
            F("threatType"),
            F("description"),
            F("time", "date"),
        ]),
        default_sort=SortConfig("time", "desc"),
    ),
    CollectionDefinition(
        key="geo_watch", label="Geo Watch", group=GROUP_THREAT_INTEL,
        endpoint="/threat-intelligence/geo-watch", noun="geo watch events",
        schema=RowSchema([
            F("eventType"),
            F("location"),
            F("country"),
            F("region"),
            F("time", "date"),
            F("source"),
            F("severity", "choice", choices=SEVERITIES),
            F("status", "choice", choices=INCIDENT_STATUSES),
            F("assetAffected", required=False),
            F("customAlertsTriggered", "bool", required=False, default=False),
            F("actionTaken", required=False),
            F("commentsNotes", required=False),
        ]),
        default_sort=SortConfig("time", "desc"),
    ),

    # -- Executive dashboard --------------------------------------------------
    CollectionDefinition(
        key="security_posture_score", label="Security Posture Score", group=GROUP_EXECUTIVE,
        endpoint="/executive-dashboard/security-posture-score", noun="posture scores",
        schema=RowSchema(
            [F("percentage", "float", min_value=0, max_value=100),
             F("score", "float", min_value=0)] + _period(quarter=True),
            unique_together=("month", "year"),
        ),
    ),
    CollectionDefinition(
        key="security_breach_indicators", label="Security Breach Indicators", group=GROUP_EXECUTIVE,
        endpoint="/executive-dashboard/security-breach-indicators", noun="breach indicators",
        schema=RowSchema(
            _period(quarter=True) + [F("score", "float", min_value=0), F("indicator")],
            unique_together=("month", "year", "indicator"),
        ),
    ),
    CollectionDefinition(
        key="incident_alert_volume", label="Incident & Alert Volume", group=GROUP_EXECUTIVE,
        endpoint="/executive-dashboard/incidents-qu", noun="volume entries",
        schema=RowSchema(
            _period(quarter=True) + [F("score", "float", min_value=0)],
            unique_together=("month", "year"),
        ),
    ),
    CollectionDefinition(
        key="digital_risk_intelligence", label="Digital Risk Intelligence", group=GROUP_EXECUTIVE,
        endpoint="/executive-dashboard/digital-risk-intelligence", noun="risk indicators",
        schema=RowSchema(
            [F("level", "choice", choices=SEVERITIES), F("indicator")] + _period(quarter=True),
        ),
    ),
    CollectionDefinition(
        key="threat_composition", label="Threat Composition", group=GROUP_EXECUTIVE,
        endpoint="/executive-dashboard/threat-composition-overview", noun="threat compositions",
        schema=RowSchema(
            _period() + [
                F("severityLevel", "choice", choices=SEVERITIES),
                F("threatType"),
                F("attackVector"),
                F("bu", "choice", choices=BU_LIST, label="Business Unit"),
                F("affectedAsset"),
                F("incidentCount", "int", min_value=0),
            ],
            unique_together=("month", "year", "bu", "threatType", "attackVector"),
        ),
    ),

    # -- Business units security ---------------------------------------------
    CollectionDefinition(
        key="soc_team_performance", label="SOC Team Performance", group=GROUP_BU_SECURITY,
        endpoint="/bu-security/soc-team-performance", noun="team performance records",
        schema=RowSchema(
            _period() + [
                F("teamName"),
                F("buName", "choice", choices=BU_LIST, label="Business Unit"),
                F("resolutionRate", "float", min_value=0, max_value=1),
                F("accuracy", "float", min_value=0, max_value=1),
                F("incidentsHandled", "int", min_value=0),
            ],
            unique_together=("month", "year", "teamName", "buName"),
        ),
    ),
    CollectionDefinition(
        key="alert_type_distribution", label="Alert Type Distribution", group=GROUP_BU_SECURITY,
        endpoint="/bu-security/alert-type-distribution", noun="alert type entries",
        schema=RowSchema(
            _period() + [
                F("buName", "choice", choices=BU_LIST, label="Business Unit"),
                F("alertName"),
                F("count", "int", min_value=0),
            ],
            unique_together=("month", "year", "buName", "alertName"),
        ),
    ),
    CollectionDefinition(
        key="risk_assessment_by_bu", label="Risk Assessment by BU", group=GROUP_BU_SECURITY,
        endpoint="/bu-security/risk-assessments-by-bu", noun="risk assessments",
        schema=RowSchema(
            _period() + [
                F("buName", "choice", choices=BU_LIST, label="Business Unit"),
                F("severity", "choice", choices=SEVERITIES),
                F("count", "int", min_value=0),
            ],
            unique_together=("month", "year", "buName", "severity"),
        ),
    ),
    CollectionDefinition(
        key="network_security", label="Network Security", group=GROUP_BU_SECURITY,
        endpoint="/bu-security/network-security", noun="network security scores",
        schema=RowSchema(
            _period() + [
                F("buName", "choice", choices=BU_LIST, label="Business Unit"),
                F("activityName"),
                F("score", "float", min_value=0, max_value=100),
            ],
            unique_together=("month", "year", "buName", "activityName"),
        ),
    ),

    # -- Compliance -----------------------------------------------------------
    CollectionDefinition(
        key="third_party_threat", label="Third-Party Threat Intelligence", group=GROUP_COMPLIANCE,
        endpoint="/executive-dashboard/third-party-threat", noun="third-party entries",
        schema=RowSchema(
            [F("thirdParty"), F("severity", "choice", choices=SEVERITIES)] + _period(quarter=True),
            unique_together=("thirdParty", "month", "year"),
        ),
    ),

    # -- Security breach indicators ------------------------------------------
    CollectionDefinition(
        key="compliance_scores", label="Compliance Scores", group=GROUP_BREACH,
        endpoint="/security-breach-indicators-dashboard/compliance-score", noun="compliance scores",
        schema=RowSchema(
            _period() + [
                F("bu", "choice", choices=BU_LIST, label="Business Unit"),
                F("compliance", required=False),
                F("count", "int", required=False, min_value=0),
            ],
            unique_together=("month", "year", "bu", "compliance"),
        ),
    ),

    # -- User behavior analytics ---------------------------------------------
    CollectionDefinition(
        key="uba_trends", label="User Behavior Analytics Trends", group=GROUP_UBA,
        endpoint="/uba/analytics", noun="UBA records",
        schema=RowSchema(
            _period() + [
                F("criticalAlerts", "int", min_value=0),
                F("AvgRiskScore", "float", min_value=0, max_value=100, label="Avg Risk Score"),
                F("suspiciousUsers", "int", min_value=0),
            ],
            unique_together=("month", "year"),
        ),
    ),
]


def collections_by_group() -> Dict[str, List[CollectionDefinition]]:
    groups: Dict[str, List[CollectionDefinition]] = {}
    for definition in COLLECTIONS:
        groups.setdefault(definition.group, []).append(definition)
    return groups


def get_collection(key: str) -> CollectionDefinition:
    for definition in COLLECTIONS:
        if definition.key == key:
            return definition
    raise KeyError(f"Unknown collection: {key}")
