"""Attribute keys and values of the metrics wire format."""

from __future__ import annotations

from flagcore._version import __version__

FEATURE_IDENTIFIER_ATTRIBUTE = "featureIdentifier"
FEATURE_NAME_ATTRIBUTE = "featureName"
VARIATION_IDENTIFIER_ATTRIBUTE = "variationIdentifier"
TARGET_ATTRIBUTE = "target"
SDK_TYPE_ATTRIBUTE = "SDK_TYPE"
SDK_LANGUAGE_ATTRIBUTE = "SDK_LANGUAGE"
SDK_VERSION_ATTRIBUTE = "SDK_VERSION"

SDK_TYPE = "server"
SDK_LANGUAGE = "python"
SDK_VERSION = __version__

# counts are keyed per flag and variation only, so they are reported under one
# shared target instead of the evaluated identifier; targets travel in targetData
GLOBAL_TARGET = "__global__cf_target"

METRICS_TYPE = "FFMETRICS"
