CRD_GROUP = "ryogoku.stark"
CRD_VERSION = "v1"
CRD_KIND_DEVNET = "Devnet"
CRD_PLURAL_DEVNET = "devnets"
CRD_SINGULAR_DEVNET = "devnet"
CRD_NAME_DEVNET = f"{CRD_PLURAL_DEVNET}.{CRD_GROUP}"
CRD_API_VERSION = f"{CRD_GROUP}/{CRD_VERSION}"
