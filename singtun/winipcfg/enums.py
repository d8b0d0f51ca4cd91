"""Enumerations and flag sets used by the Windows IP helper and DNS interfaces."""

from __future__ import annotations

import enum

DNS_INTERFACE_SETTINGS_VERSION1 = 1
DNS_INTERFACE_SETTINGS_VERSION2 = 2
DNS_INTERFACE_SETTINGS_VERSION3 = 3


class IPAAFlags(enum.IntFlag):
    """Adapter address flags."""

    DDNS_ENABLED = 1 << 0
    REGISTER_ADAPTER_SUFFIX = 1 << 1
    DHCPV4_ENABLED = 1 << 2
    RECEIVE_ONLY = 1 << 3
    NO_MULTICAST = 1 << 4
    IPV6_OTHER_STATEFUL_CONFIG = 1 << 5
    NETBIOS_OVER_TCPIP_ENABLED = 1 << 6
    IPV4_ENABLED = 1 << 7
    IPV6_ENABLED = 1 << 8
    IPV6_MANAGED_ADDRESS_CONFIGURATION_SUPPORTED = 1 << 9


class IfOperStatus(enum.IntEnum):
    """Operational status of an interface."""

    UP = 1
    DOWN = 2
    TESTING = 3
    UNKNOWN = 4
    DORMANT = 5
    NOT_PRESENT = 6
    LOWER_LAYER_DOWN = 7


class IfType(enum.IntEnum):
    """Interface type numbers as assigned by IANA."""

    OTHER = 1
    REGULAR_1822 = 2
    HDH_1822 = 3
    DDN_X25 = 4
    RFC877_X25 = 5
    ETHERNET_CSMACD = 6
    ISO88023_CSMACD = 7
    ISO88024_TOKENBUS = 8
    ISO88025_TOKENRING = 9
    ISO88026_MAN = 10
    STARLAN = 11
    PROTEON_10MBIT = 12
    PROTEON_80MBIT = 13
    HYPERCHANNEL = 14
    FDDI = 15
    LAP_B = 16
    SDLC = 17
    DS1 = 18
    E1 = 19
    BASIC_ISDN = 20
    PRIMARY_ISDN = 21
    PROP_POINT2POINT_SERIAL = 22
    PPP = 23
    SOFTWARE_LOOPBACK = 24
    EON = 25
    ETHERNET_3MBIT = 26
    NSIP = 27
    SLIP = 28
    ULTRA = 29
    DS3 = 30
    SIP = 31
    FRAMERELAY = 32
    RS232 = 33
    PARA = 34
    ARCNET = 35
    ARCNET_PLUS = 36
    ATM = 37
    MIO_X25 = 38
    SONET = 39
    X25_PLE = 40
    ISO88022_LLC = 41
    LOCALTALK = 42
    SMDS_DXI = 43
    FRAMERELAY_SERVICE = 44
    V35 = 45
    HSSI = 46
    HIPPI = 47
    MODEM = 48
    AAL5 = 49
    SONET_PATH = 50
    SONET_VT = 51
    SMDS_ICIP = 52
    PROP_VIRTUAL = 53
    PROP_MULTIPLEXOR = 54
    IEEE80212 = 55
    FIBRECHANNEL = 56
    HIPPIINTERFACE = 57
    FRAMERELAY_INTERCONNECT = 58
    AFLANE_8023 = 59
    AFLANE_8025 = 60
    CCTEMUL = 61
    FASTETHER = 62
    ISDN = 63
    V11 = 64
    V36 = 65
    G703_64K = 66
    G703_2MB = 67
    QLLC = 68
    FASTETHER_FX = 69
    CHANNEL = 70
    IEEE80211 = 71
    IBM370PARCHAN = 72
    ESCON = 73
    DLSW = 74
    ISDN_S = 75
    ISDN_U = 76
    LAP_D = 77
    IPSWITCH = 78
    RSRB = 79
    ATM_LOGICAL = 80
    DS0 = 81
    DS0_BUNDLE = 82
    BSC = 83
    ASYNC = 84
    CNR = 85
    ISO88025R_DTR = 86
    EPLRS = 87
    ARAP = 88
    PROP_CNLS = 89
    HOSTPAD = 90
    TERMPAD = 91
    FRAMERELAY_MPI = 92
    X213 = 93
    ADSL = 94
    RADSL = 95
    SDSL = 96
    VDSL = 97
    ISO88025_CRFPRINT = 98
    MYRINET = 99
    VOICE_EM = 100
    VOICE_FXO = 101
    VOICE_FXS = 102
    VOICE_ENCAP = 103
    VOICE_OVERIP = 104
    ATM_DXI = 105
    ATM_FUNI = 106
    ATM_IMA = 107
    PPP_MULTILINK_BUNDLE = 108
    IPOVER_CDLC = 109
    IPOVER_CLAW = 110
    STACKTOSTACK = 111
    VIRTUALIPADDRESS = 112
    MPC = 113
    IPOVER_ATM = 114
    ISO88025_FIBER = 115
    TDLC = 116
    GIGABITETHERNET = 117
    HDLC = 118
    LAP_F = 119
    V37 = 120
    X25_MLP = 121
    X25_HUNTGROUP = 122
    TRANSPHDLC = 123
    INTERLEAVE = 124
    FAST = 125
    IP = 126
    DOCSCABLE_MACLAYER = 127
    DOCSCABLE_DOWNSTREAM = 128
    DOCSCABLE_UPSTREAM = 129
    A12MPPSWITCH = 130
    TUNNEL = 131
    COFFEE = 132
    CES = 133
    ATM_SUBINTERFACE = 134
    L2_VLAN = 135
    L3_IPVLAN = 136
    L3_IPXVLAN = 137
    DIGITALPOWERLINE = 138
    MEDIAMAILOVERIP = 139
    DTM = 140
    DCN = 141
    IPFORWARD = 142
    MSDSL = 143
    IEEE1394 = 144
    IF_GSN = 145
    DVBRCC_MACLAYER = 146
    DVBRCC_DOWNSTREAM = 147
    DVBRCC_UPSTREAM = 148
    ATM_VIRTUAL = 149
    MPLS_TUNNEL = 150
    SRP = 151
    VOICEOVERATM = 152
    VOICEOVERFRAMERELAY = 153
    IDSL = 154
    COMPOSITELINK = 155
    SS7_SIGLINK = 156
    PROP_WIRELESS_P2P = 157
    FR_FORWARD = 158
    RFC1483 = 159
    USB = 160
    IEEE8023AD_LAG = 161
    BGP_POLICY_ACCOUNTING = 162
    FRF16_MFR_BUNDLE = 163
    H323_GATEKEEPER = 164
    H323_PROXY = 165
    MPLS = 166
    MF_SIGLINK = 167
    HDSL2 = 168
    SHDSL = 169
    DS1_FDL = 170
    POS = 171
    DVB_ASI_IN = 172
    DVB_ASI_OUT = 173
    PLC = 174
    NFAS = 175
    TR008 = 176
    GR303_RDT = 177
    GR303_IDT = 178
    ISUP = 179
    PROP_DOCS_WIRELESS_MACLAYER = 180
    PROP_DOCS_WIRELESS_DOWNSTREAM = 181
    PROP_DOCS_WIRELESS_UPSTREAM = 182
    HIPERLAN2 = 183
    PROP_BWA_P2MP = 184
    SONET_OVERHEAD_CHANNEL = 185
    DIGITAL_WRAPPER_OVERHEAD_CHANNEL = 186
    AAL2 = 187
    RADIO_MAC = 188
    ATM_RADIO = 189
    IMT = 190
    MVL = 191
    REACH_DSL = 192
    FR_DLCI_ENDPT = 193
    ATM_VCI_ENDPT = 194
    OPTICAL_CHANNEL = 195
    OPTICAL_TRANSPORT = 196
    IEEE80216_WMAN = 237
    WWANPP = 243
    WWANPP2 = 244
    IEEE802154 = 259
    XBOX_WIRELESS = 281


class MibIfEntryLevel(enum.IntEnum):
    """How much interface information a table query returns."""

    NORMAL = 0
    NORMAL_WITHOUT_STATISTICS = 2


class NdisMedium(enum.IntEnum):
    """Medium types that NDIS drivers support."""

    MEDIUM_802_3 = 0
    MEDIUM_802_5 = 1
    FDDI = 2
    WAN = 3
    LOCAL_TALK = 4
    DIX = 5
    ARCNET_RAW = 6
    ARCNET_878_2 = 7
    ATM = 8
    WIRELESS_WAN = 9
    IRDA = 10
    BPC = 11
    CO_WAN = 12
    MEDIUM_1394 = 13
    INFINIBAND = 14
    TUNNEL = 15
    NATIVE_802_11 = 16
    LOOPBACK = 17
    WIMAX = 18
    IP = 19
    MAX = 20


class NdisPhysicalMedium(enum.IntEnum):
    """Physical medium of an NDIS interface."""

    UNSPECIFIED = 0
    WIRELESS_LAN = 1
    CABLE_MODEM = 2
    PHONE_LINE = 3
    POWER_LINE = 4
    DSL = 5
    FIBRE_CHANNEL = 6
    MEDIUM_1394 = 7
    WIRELESS_WAN = 8
    NATIVE_802_11 = 9
    BLUETOOTH = 10
    INFINIBAND = 11
    WIMAX = 12
    UWB = 13
    MEDIUM_802_3 = 14
    MEDIUM_802_5 = 15
    IRDA = 16
    WIRED_WAN = 17
    WIRED_CO_WAN = 18
    OTHER = 19
    NATIVE_802_15_4 = 20
    MAX = 21


class NetIfAccessType(enum.IntEnum):
    """Access type of a network interface."""

    LOOPBACK = 1
    BROADCAST = 2
    POINT_TO_POINT = 3
    POINT_TO_MULTI_POINT = 4
    MAX = 5


class NetIfAdminStatus(enum.IntEnum):
    """Administrative status of a network interface."""

    UP = 1
    DOWN = 2
    TESTING = 3


class NetIfConnectionType(enum.IntEnum):
    """Connection type of a network interface."""

    DEDICATED = 1
    PASSIVE = 2
    DEMAND = 3
    MAXIMUM = 4


class NetIfDirectionType(enum.IntEnum):
    """Direction of traffic on a network interface."""

    SEND_RECEIVE = 0
    SEND_ONLY = 1
    RECEIVE_ONLY = 2
    MAXIMUM = 3


class NetIfMediaConnectState(enum.IntEnum):
    """Media connection state of a network interface."""

    UNKNOWN = 0
    CONNECTED = 1
    DISCONNECTED = 2


class DadState(enum.IntEnum):
    """Duplicate address detection state of an address."""

    INVALID = 0
    TENTATIVE = 1
    DUPLICATE = 2
    DEPRECATED = 3
    PREFERRED = 4


class PrefixOrigin(enum.IntEnum):
    """Where an address prefix came from."""

    OTHER = 0
    MANUAL = 1
    WELL_KNOWN = 2
    DHCP = 3
    ROUTER_ADVERTISEMENT = 4
    UNCHANGED = 1 << 4


class LinkLocalAddressBehavior(enum.IntEnum):
    """When link-local addresses are used."""

    ALWAYS_OFF = 0
    DELAYED = 1
    ALWAYS_ON = 2
    UNCHANGED = -1


class OffloadRod(enum.IntFlag):
    """Offload capabilities of an IP interface."""

    CHECKSUM_SUPPORTED = 1 << 0
    OPTIONS_SUPPORTED = 1 << 1
    DATAGRAM_CHECKSUM_SUPPORTED = 1 << 2
    STREAM_CHECKSUM_SUPPORTED = 1 << 3
    STREAM_OPTIONS_SUPPORTED = 1 << 4
    FAST_PATH_COMPATIBLE = 1 << 5
    LARGE_SEND_OFFLOAD_SUPPORTED = 1 << 6
    GIANT_SEND_OFFLOAD_SUPPORTED = 1 << 7


class RouteOrigin(enum.IntEnum):
    """Where a route came from."""

    MANUAL = 0
    WELL_KNOWN = 1
    DHCP = 2
    ROUTER_ADVERTISEMENT = 3
    ORIGIN_6TO4 = 4


class RouteProtocol(enum.IntEnum):
    """Routing mechanism a route was added with."""

    OTHER = 1
    LOCAL = 2
    NET_MGMT = 3
    ICMP = 4
    EGP = 5
    GGP = 6
    HELLO = 7
    RIP = 8
    IS_IS = 9
    ES_IS = 10
    CISCO = 11
    BBN = 12
    OSPF = 13
    BGP = 14
    IDPR = 15
    EIGRP = 16
    DVMRP = 17
    RPL = 18
    DHCP = 19
    NT_AUTOSTATIC = 10002
    NT_STATIC = 10006
    NT_STATIC_NON_DOD = 10007


class RouterDiscoveryBehavior(enum.IntEnum):
    """Router discovery behaviour of an interface."""

    DISABLED = 0
    ENABLED = 1
    DHCP = 2
    UNCHANGED = -1


class SuffixOrigin(enum.IntEnum):
    """Where an address suffix came from."""

    OTHER = 0
    MANUAL = 1
    WELL_KNOWN = 2
    DHCP = 3
    LINK_LAYER_ADDRESS = 4
    RANDOM = 5
    UNCHANGED = 1 << 4


class MibNotificationType(enum.IntEnum):
    """Kind of change reported to a change callback."""

    PARAMETER_NOTIFICATION = 0
    ADD_INSTANCE = 1
    DELETE_INSTANCE = 2
    INITIAL_NOTIFICATION = 3


class TunnelType(enum.IntEnum):
    """Encapsulation method of a tunnel interface."""

    NONE = 0
    OTHER = 1
    DIRECT = 2
    TYPE_6TO4 = 11
    ISATAP = 13
    TEREDO = 14
    IPHTTPS = 15


class InterfaceAndOperStatusFlags(enum.IntFlag):
    """Interface and operation status flags."""

    HARDWARE_INTERFACE = 1 << 0
    FILTER_INTERFACE = 1 << 1
    CONNECTOR_PRESENT = 1 << 2
    NOT_AUTHENTICATED = 1 << 3
    NOT_MEDIA_CONNECTED = 1 << 4
    PAUSED = 1 << 5
    LOW_POWER = 1 << 6
    END_POINT_INTERFACE = 1 << 7


class GAAFlags(enum.IntFlag):
    """Flags for adapter address queries."""

    DEFAULT = 0
    SKIP_UNICAST = 1 << 0
    SKIP_ANYCAST = 1 << 1
    SKIP_MULTICAST = 1 << 2
    SKIP_DNS_SERVER = 1 << 3
    INCLUDE_PREFIX = 1 << 4
    SKIP_FRIENDLY_NAME = 1 << 5
    INCLUDE_WINS_INFO = 1 << 6
    INCLUDE_GATEWAYS = 1 << 7
    INCLUDE_ALL_INTERFACES = 1 << 8
    INCLUDE_ALL_COMPARTMENTS = 1 << 9
    INCLUDE_TUNNEL_BINDING_ORDER = 1 << 10
    SKIP_DNS_INFO = 1 << 11

    SKIP_ALL = (
        SKIP_UNICAST
        | SKIP_ANYCAST
        | SKIP_MULTICAST
        | SKIP_DNS_SERVER
        | SKIP_FRIENDLY_NAME
        | SKIP_DNS_INFO
    )
    INCLUDE_ALL = (
        INCLUDE_PREFIX
        | INCLUDE_WINS_INFO
        | INCLUDE_GATEWAYS
        | INCLUDE_ALL_INTERFACES
        | INCLUDE_ALL_COMPARTMENTS
        | INCLUDE_TUNNEL_BINDING_ORDER
    )


class ScopeLevel(enum.IntEnum):
    """Scope levels of IPv6 addresses."""

    INTERFACE = 1
    LINK = 2
    SUBNET = 3
    ADMIN = 4
    SITE = 5
    ORGANIZATION = 8
    GLOBAL = 14
    COUNT = 16


class DnsInterfaceSettingsFlag(enum.IntFlag):
    """Which fields of the DNS interface settings are to be applied."""

    IPV6 = 0x0001
    NAMESERVER = 0x0002
    SEARCH_LIST = 0x0004
    REGISTRATION_ENABLED = 0x0008
    REGISTER_ADAPTER_NAME = 0x0010
    DOMAIN = 0x0020
    HOSTNAME = 0x0040
    ENABLE_LLMNR = 0x0080
    QUERY_ADAPTER_NAME = 0x0100
    PROFILE_NAMESERVER = 0x0200
    DISABLE_UNCONSTRAINED_QUERIES = 0x0400
    SUPPLEMENTAL_SEARCH_LIST = 0x0800
    DOH = 0x1000
    DOH_PROFILE = 0x2000