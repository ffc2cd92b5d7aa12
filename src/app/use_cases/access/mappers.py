from typing import Optional

from src.domain.access import AccessibleEntity, AccessLevel, EffectiveMember, EntityRef

from .dtos import AccessibleEntityInfo, AccessLevelResponse, EntityRefResponse, MemberInfo


def ref_response(ref: Optional[EntityRef]) -> Optional[EntityRefResponse]:
    if ref is None:
        return None
    return EntityRefResponse(type=ref.type.value, id=str(ref.id))


def level_response(level: AccessLevel) -> AccessLevelResponse:
    return AccessLevelResponse(
        role=level.role.value,
        origin=ref_response(level.origin),
        is_inherited=level.is_inherited,
        via_allow_list=level.via_allow_list,
    )


def member_info(member: EffectiveMember) -> MemberInfo:
    return MemberInfo(
        user_id=str(member.user_id),
        role=member.role.value,
        is_inherited=member.is_inherited,
        inherited_from=ref_response(member.inherited_from),
        via_allow_list=member.via_allow_list,
    )


def accessible_info(item: AccessibleEntity) -> AccessibleEntityInfo:
    return AccessibleEntityInfo(
        type=item.entity.type.value,
        id=str(item.entity.id),
        name=item.entity.name,
        role=item.access.role.value,
        origin=ref_response(item.access.origin),
        via_allow_list=item.access.via_allow_list,
    )
