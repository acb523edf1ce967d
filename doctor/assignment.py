"""
Assignment Optimizer.

Chooses the doctor with the lightest load among those who can take a
walk-in patient right now.
"""
import logging

from core.constants import DOCTOR_AVAILABLE, DOCTOR_OFFLINE
from .schedule import is_schedule_available

logger = logging.getLogger(__name__)


def rank_doctors(candidates, workloads, local_now):
    """
    Filter and order candidate doctors, best first.

    ``workloads`` maps doctor id to the number of active queue entries
    currently assigned to that doctor.
    """
    ranked = []
    for doctor in candidates:
        if not doctor.is_active or doctor.status == DOCTOR_OFFLINE:
            continue
        if not is_schedule_available(doctor, local_now):
            continue
        workload = workloads.get(doctor.pk, 0)
        ranked.append((
            (
                doctor.status != DOCTOR_AVAILABLE,
                workload != 0,
                workload,
            ),
            doctor,
        ))

    ranked.sort(key=lambda item: item[0])
    return [doctor for _, doctor in ranked]


def select_optimal_doctor(candidates, workloads, local_now):
    """Best doctor for an unassigned queue entry, or None"""
    ranked = rank_doctors(candidates, workloads, local_now)
    if not ranked:
        logger.debug("No doctor qualifies for assignment")
        return None

    chosen = ranked[0]
    logger.debug(f"Selected doctor {chosen.pk} with workload {workloads.get(chosen.pk, 0)}")
    return chosen
