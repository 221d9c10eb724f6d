from silkworm_monitor.schemas.sensor import Thresholds

# Fixed safety limits for the enclosure. Shared by the alert evaluator and the
# status classifiers; not exposed as settings.
THRESHOLDS = Thresholds()
