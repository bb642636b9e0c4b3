"""Event names shared by stores and network modules."""

# Address store
ON_ADDRESS_SUBSCRIPTION = "address/ON_ADDRESS_SUBSCRIPTION"
ON_TRANSACTION_SUBSCRIPTION = "address/ON_TRANSACTION_SUBSCRIPTION"
UPDATE_TX_LABEL = "address/UPDATE_TX_LABEL"
TX_LABEL_UPDATED = "address/TX_LABEL_UPDATED"

# Blockchain
SET_BLOCK_HEIGHT = "blockchain/SET_BLOCK_HEIGHT"

# Mint ledger
UPDATE_MINT = "mint/UPDATE_MINT"

# Payment requests
CREATE_PAYMENT_REQUEST = "paymentrequest/CREATE_PAYMENT_REQUEST"
ADD_PAYMENT_REQUEST = "paymentrequest/ADD_PAYMENT_REQUEST"
