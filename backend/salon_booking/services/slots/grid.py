# backend/salon_booking/services/slots/grid.py
"""
Slot grid: every start time that physically fits inside business hours.

No cutoff or conflict filtering happens here.
"""


def generate_slot_grid(
    open_min: int,
    close_min: int,
    total_duration: int,
    step: int,
) -> list[int]:
    """
    Candidate start times open, open+step, ... while start + total_duration <= close.

    Returns:
        Ascending list of minutes since midnight. Empty if nothing fits.
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    if total_duration <= 0:
        raise ValueError(f"total_duration must be positive, got {total_duration}")

    slots = []
    t = open_min
    while t + total_duration <= close_min:
        slots.append(t)
        t += step
    return slots
