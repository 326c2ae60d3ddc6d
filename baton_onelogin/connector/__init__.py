"""Resource syncers, page tokens and the OneLogin connector."""