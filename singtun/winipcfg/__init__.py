"""IP Helper data types: enumerations, socket addresses and address prefixes."""