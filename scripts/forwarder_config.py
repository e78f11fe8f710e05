"""Example forwarder configuration.

Modify the inputs, outputs and pipelines below to describe where logs
should go. Generator options live in the ``generator`` section; anything
not set there uses the expert defaults in src/logforward/schemas/param.py

Usage:
    python scripts/generate_collector_config.py scripts/forwarder_config.py
    python scripts/generate_collector_config.py scripts/forwarder_config.py --secrets secrets.json
"""

CONFIG = {
    # ========================================================================
    # GENERATOR OPTIONS
    # ========================================================================
    "generator": {
        "METRICS_PORT": 24231,
        "MIN_TLS_VERSION": "VersionTLS12",
        "LOG_LEVEL": "INFO",
    },

    # ========================================================================
    # INPUTS
    # ========================================================================
    "inputs": [
        {
            "name": "payments",
            "application": {
                "namespaces": ["payments", "payments-*"],
                "selector": {"matchLabels": {"tier": "backend"}},
                "containerLimit": {"maxRecordsPerSecond": 100},
            },
        },
        {
            "name": "audit-webhook",
            "receiver": {"type": "http", "http": {"port": 8443, "format": "kubeAPIAudit"}},
        },
    ],

    # ========================================================================
    # OUTPUTS
    # ========================================================================
    "outputs": [
        {
            "name": "es-main",
            "type": "elasticsearch",
            "url": "https://elasticsearch.logging.svc:9200",
        },
        {
            "name": "archive",
            "type": "kafka",
            "url": "tls://kafka.logging.svc:9093/logs",
            "rateLimit": {"maxRecordsPerSecond": 5000},
        },
    ],

    # ========================================================================
    # PIPELINES
    # ========================================================================
    "pipelines": [
        {"name": "apps", "inputRefs": ["payments"], "outputRefs": ["es-main"]},
        {
            "name": "everything",
            "inputRefs": ["infrastructure", "audit", "audit-webhook"],
            "outputRefs": ["archive"],
            "labels": {"cluster": "prod-east"},
        },
    ],
}
