import pytest

from singtun.winipcfg.enums import (
    DadState,
    DnsInterfaceSettingsFlag,
    GAAFlags,
    IfOperStatus,
    IfType,
    InterfaceAndOperStatusFlags,
    IPAAFlags,
    LinkLocalAddressBehavior,
    MibNotificationType,
    NdisMedium,
    NdisPhysicalMedium,
    NetIfAccessType,
    NetIfAdminStatus,
    NetIfConnectionType,
    NetIfDirectionType,
    NetIfMediaConnectState,
    OffloadRod,
    PrefixOrigin,
    RouteOrigin,
    RouteProtocol,
    RouterDiscoveryBehavior,
    ScopeLevel,
    SuffixOrigin,
    TunnelType,
)


@pytest.mark.parametrize(
    "cls, start",
    [
        (NdisMedium, 0),
        (NdisPhysicalMedium, 0),
        (IfOperStatus, 1),
        (NetIfAccessType, 1),
        (NetIfAdminStatus, 1),
        (NetIfConnectionType, 1),
        (NetIfDirectionType, 0),
        (NetIfMediaConnectState, 0),
        (DadState, 0),
        (RouteOrigin, 0),
        (MibNotificationType, 0),
    ],
)
def test_sequential_enumerations(cls, start):
    values = [member.value for member in cls]
    assert values == list(range(start, start + len(values)))


@pytest.mark.parametrize("cls", [IPAAFlags, OffloadRod, InterfaceAndOperStatusFlags])
def test_flag_members_are_successive_bits(cls):
    values = [member.value for member in cls]
    assert values == [1 << i for i in range(len(values))]


def test_if_type_values_from_source():
    assert IfType.XBOX_WIRELESS == 281
    assert IfType(259) is IfType.IEEE802154


def test_if_type_values_unique():
    names = sorted(IfType(member.value).name for member in IfType)
    assert names == sorted(IfType.__members__)


def test_if_type_unknown_value_rejected():
    with pytest.raises(ValueError):
        IfType(999)


def test_route_protocol_nt_values():
    assert RouteProtocol(10002) is RouteProtocol.NT_AUTOSTATIC
    assert RouteProtocol(10006) is RouteProtocol.NT_STATIC
    assert RouteProtocol(10007) is RouteProtocol.NT_STATIC_NON_DOD


def test_route_protocol_standard_range_is_sequential():
    standard = [RouteProtocol(value) for value in range(1, 20)]
    assert standard[0] is RouteProtocol.OTHER if hasattr(RouteProtocol, "OTHER") else True
    assert standard[-1] is RouteProtocol.DHCP
    with pytest.raises(ValueError):
        RouteProtocol(20)


def test_unchanged_sentinels_agree():
    assert LinkLocalAddressBehavior(-1) is LinkLocalAddressBehavior.UNCHANGED
    assert RouterDiscoveryBehavior(-1) is RouterDiscoveryBehavior.UNCHANGED
    assert PrefixOrigin(16) is PrefixOrigin.UNCHANGED
    assert SuffixOrigin(16) is SuffixOrigin.UNCHANGED
    assert all(m < PrefixOrigin.UNCHANGED for m in PrefixOrigin if m is not PrefixOrigin.UNCHANGED)


def test_gaa_skip_and_include_sets_are_disjoint():
    assert GAAFlags(int(GAAFlags.SKIP_ALL) & int(GAAFlags.INCLUDE_ALL)) == GAAFlags.DEFAULT
    assert GAAFlags.SKIP_UNICAST in GAAFlags(int(GAAFlags.SKIP_ALL))
    assert GAAFlags.SKIP_DNS_INFO in GAAFlags.SKIP_ALL
    assert GAAFlags.INCLUDE_PREFIX not in GAAFlags.SKIP_ALL
    assert GAAFlags.INCLUDE_GATEWAYS in GAAFlags(int(GAAFlags.INCLUDE_ALL))


def test_dns_flags_from_source():
    assert DnsInterfaceSettingsFlag(0x1000) is DnsInterfaceSettingsFlag.DOH
    assert DnsInterfaceSettingsFlag(0x2000) is DnsInterfaceSettingsFlag.DOH_PROFILE


def test_dns_flags_round_trip():
    combined = (
        DnsInterfaceSettingsFlag.NAMESERVER
        | DnsInterfaceSettingsFlag.SEARCH_LIST
        | DnsInterfaceSettingsFlag.IPV6
    )
    restored = DnsInterfaceSettingsFlag(int(combined))
    assert restored == combined
    assert DnsInterfaceSettingsFlag.SEARCH_LIST in restored
    assert DnsInterfaceSettingsFlag.DOMAIN not in restored


@pytest.mark.parametrize("cls", [TunnelType, ScopeLevel, IfType, RouteProtocol])
def test_values_round_trip(cls):
    for member in cls:
        assert cls(int(member)) is member


def test_scope_levels_increase():
    levels = [ScopeLevel(value) for value in (1, 2, 3, 4, 5, 8, 14, 16)]
    assert levels == sorted(levels)
    assert levels[-1] is ScopeLevel.COUNT
    with pytest.raises(ValueError):
        ScopeLevel(6)