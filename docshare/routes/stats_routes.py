from typing import Optional

from fastapi import APIRouter, Depends

from docshare.auth.dependencies import Identity, get_current_identity, get_optional_identity
from docshare.core.dependencies import StatsAggregatorDep

router = APIRouter(tags=['stats'])


@router.get('/system')
def system_stats(
    aggregator: StatsAggregatorDep,
    identity: Optional[Identity] = Depends(get_optional_identity),
):
    del identity
    return aggregator.system_stats()


@router.get('/teacher/{user_id}')
def teacher_stats(
    user_id: int,
    aggregator: StatsAggregatorDep,
    identity: Identity = Depends(get_current_identity),
):
    return aggregator.teacher_stats(identity, user_id)


@router.get('/student/{user_id}')
def student_stats(
    user_id: int,
    aggregator: StatsAggregatorDep,
    identity: Identity = Depends(get_current_identity),
):
    return aggregator.student_stats(identity, user_id)
