from silkworm_monitor.schemas.sensor import Reading, Status, Thresholds


def humidity_status(reading: Reading, thresholds: Thresholds) -> Status:
    if reading.humidity > thresholds.high_humidity:
        return Status(text="CRITICAL", tier="critical")
    if reading.humidity < thresholds.low_humidity:
        return Status(text="LOW", tier="warning")
    return Status(text="Normal", tier="normal")


def temperature_status(reading: Reading, thresholds: Thresholds) -> Status:
    if reading.temp > thresholds.high_temp:
        return Status(text="Too High", tier="warning")
    if reading.temp < thresholds.low_temp:
        return Status(text="Too Low", tier="warning")
    return Status(text="Optimal", tier="normal")


def water_status(reading: Reading, thresholds: Thresholds) -> Status:
    if reading.water < thresholds.low_water:
        return Status(text="LOW - Refill Soon", tier="warning")
    if reading.water < thresholds.moderate_water:
        return Status(text="Moderate", tier="caution")
    return Status(text="Good", tier="normal")


def motion_status(reading: Reading) -> str:
    return "Detected" if reading.ir == 0 else "Clear"


def buzzer_status(reading: Reading, thresholds: Thresholds) -> str:
    # Display indicator only; nothing drives a real buzzer.
    return "ACTIVE" if reading.humidity > thresholds.high_humidity else "Off"
