"""Hour labels for session times: 12-hour ("2:30 PM") or 24-hour ("14:30")."""


def format_time(hour: float, use_24h: bool = False) -> str:
    whole = int(hour) % 24
    minutes = int(round((hour - int(hour)) * 60))
    if use_24h:
        return f"{whole:02d}:{minutes:02d}"
    period = "AM" if whole < 12 else "PM"
    display = whole % 12 or 12
    return f"{display}:{minutes:02d} {period}"


def format_time_range(start_hour: float, end_hour: float, use_24h: bool = False) -> str:
    return f"{format_time(start_hour, use_24h)} - {format_time(end_hour, use_24h)}"
