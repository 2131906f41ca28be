from typing import Dict, List

from domain.schemas import KnowledgeBase, Resource, Skill, SkillCategory

KNOWLEDGE_BASE_NAME = "Web3 Skills Knowledge Base"
KNOWLEDGE_BASE_DESCRIPTION = "Curated Web3 and blockchain engineering skills, learning resources and reference notes"

_SKILLS: List[Dict] = [
    {
        "name": "Solidity",
        "description": "Contract-oriented, statically typed language for writing smart contracts on the Ethereum Virtual Machine; the most widely used smart contract language.",
        "category": SkillCategory.BLOCKCHAIN,
        "related_technologies": ["Ethereum", "BNB Smart Chain", "EVM", "Remix", "Truffle", "Hardhat"],
    },
    {
        "name": "Web3.js",
        "description": "JavaScript library for interacting with Ethereum nodes: querying chain data, sending transactions and calling smart contracts from front-end applications.",
        "category": SkillCategory.WEB3,
        "related_technologies": ["JavaScript", "Ethereum", "MetaMask", "React", "Vue.js"],
    },
    {
        "name": "Ethers.js",
        "description": "Compact, modular library for interacting with Ethereum and its ecosystem; lighter and more security-focused than Web3.js.",
        "category": SkillCategory.WEB3,
        "related_technologies": ["JavaScript", "TypeScript", "Ethereum", "React", "Vue.js"],
    },
    {
        "name": "Hardhat",
        "description": "Ethereum development environment for compiling, deploying, testing and debugging contracts, shipping with the local Hardhat Network.",
        "category": SkillCategory.WEB3,
        "related_technologies": ["Ethereum", "Solidity", "JavaScript", "TypeScript", "Node.js"],
    },
    {
        "name": "Truffle",
        "description": "Development environment, testing framework and asset pipeline for Ethereum covering contract compilation, linking, deployment and binary management.",
        "category": SkillCategory.WEB3,
        "related_technologies": ["Ethereum", "Solidity", "JavaScript", "Ganache"],
    },
    {
        "name": "MetaMask",
        "description": "Browser extension and mobile wallet acting as a gateway to Ethereum dApps without running a full node.",
        "category": SkillCategory.WEB3,
        "related_technologies": ["Ethereum", "Web3.js", "Ethers.js", "DApps"],
    },
    {
        "name": "IPFS",
        "description": "Peer-to-peer distributed file system commonly used in Web3 to store immutable, content-addressed data such as NFT media and metadata.",
        "category": SkillCategory.WEB3,
        "related_technologies": ["Filecoin", "NFT", "Pinata", "Infura"],
    },
    {
        "name": "NFT Development",
        "description": "Creating and managing unique digital assets that follow standards such as ERC-721 or ERC-1155, representing art, collectibles or in-game items.",
        "category": SkillCategory.NFT,
        "related_technologies": ["Solidity", "ERC-721", "ERC-1155", "OpenSea", "IPFS"],
    },
    {
        "name": "DeFi Development",
        "description": "Building financial applications without centralized intermediaries: lending platforms, decentralized exchanges, stablecoins and yield protocols.",
        "category": SkillCategory.DEFI,
        "related_technologies": ["Solidity", "Uniswap", "Aave", "Compound", "MakerDAO"],
    },
    {
        "name": "Rust",
        "description": "Systems programming language used in Web3 for high-performance blockchain nodes, Solana programs and other safety-critical components.",
        "category": SkillCategory.BLOCKCHAIN,
        "related_technologies": ["Solana", "Near", "Polkadot", "WebAssembly"],
    },
    {
        "name": "Polkadot",
        "description": "Multi-chain network letting independent blockchains (parachains) interoperate under shared security; custom chains are built with Substrate.",
        "category": SkillCategory.BLOCKCHAIN,
        "related_technologies": ["Substrate", "Rust", "Kusama", "Parachains"],
    },
    {
        "name": "ZK-Rollups",
        "description": "Layer 2 scaling that batches many transactions into a single zero-knowledge validity proof, raising throughput and lowering fees on chains such as Ethereum.",
        "category": SkillCategory.BLOCKCHAIN,
        "related_technologies": ["zkSync", "StarkNet", "Polygon zkEVM", "Zero-Knowledge Proofs"],
    },
    {
        "name": "DAO Development",
        "description": "Building decentralized autonomous organizations whose governance rules run as smart contracts and whose decisions are made by member votes.",
        "category": SkillCategory.DAO,
        "related_technologies": ["Solidity", "Aragon", "Compound Governance", "Snapshot"],
    },
    {
        "name": "Remix IDE",
        "description": "Open-source web and desktop IDE for Ethereum contracts with built-in compilation, deployment, transaction debugging and testing.",
        "category": SkillCategory.WEB3,
        "related_technologies": ["Solidity", "Ethereum", "JavaScript", "Web3.js"],
    },
]

_RESOURCES: List[Dict] = [
    {
        "title": "Solidity documentation",
        "description": "Official language reference for Solidity smart contracts, types, inheritance and security considerations.",
        "url": "https://docs.soliditylang.org/",
        "type": "documentation",
    },
    {
        "title": "Ethers.js documentation",
        "description": "Guides and API reference for providers, signers and contract interaction with Ethers.js.",
        "url": "https://docs.ethers.org/",
        "type": "documentation",
    },
    {
        "title": "Hardhat tutorial",
        "description": "Step-by-step tutorial for compiling, testing and deploying Ethereum smart contracts with Hardhat.",
        "url": "https://hardhat.org/tutorial",
        "type": "tutorial",
    },
    {
        "title": "OpenZeppelin Contracts",
        "description": "Audited Solidity implementations of ERC-20, ERC-721, ERC-1155 tokens, access control and governance.",
        "url": "https://docs.openzeppelin.com/contracts",
        "type": "documentation",
    },
    {
        "title": "IPFS documentation",
        "description": "Concepts and how-to guides for content addressing and decentralized storage with IPFS.",
        "url": "https://docs.ipfs.tech/",
        "type": "documentation",
    },
    {
        "title": "Ethereum developer portal",
        "description": "Ethereum.org developer docs covering the EVM, accounts, transactions, gas and Layer 2 scaling.",
        "url": "https://ethereum.org/en/developers/docs/",
        "type": "documentation",
    },
]

REFERENCE_TEXTS: List[Dict[str, str]] = [
    {
        "title": "Solidity fundamentals",
        "content": """
Solidity is an object-oriented, high-level language for implementing smart contracts, programs that run on a
blockchain and govern the behaviour of digital assets. It is influenced by C++, Python and JavaScript and targets
the Ethereum Virtual Machine (EVM).

Key characteristics:
- static typing
- inheritance
- libraries
- complex user-defined types

Solidity developers need to understand contract structure, data types, functions, events, modifiers, error
handling and security best practices. Expert Solidity developers master contract security auditing, gas
optimization, advanced design patterns and EVM internals.
""",
    },
    {
        "title": "Web3.js and front-end development",
        "content": """
Web3.js is the JavaScript library of the Ethereum ecosystem that lets developers interact with the blockchain. It
exposes APIs for accounts, contracts, transactions and other Ethereum objects.

Core features:
- connecting to Ethereum nodes
- account management
- smart contract interaction
- building and sending transactions
- event subscriptions

Web3 front-end developers need JavaScript/TypeScript, modern frameworks such as React, MetaMask integration,
transaction signing and state management. Senior developers also handle ENS integration, IPFS storage,
multi-chain support and decentralized identity.
""",
    },
    {
        "title": "DeFi protocols and development",
        "content": """
Decentralized finance (DeFi) is an ecosystem of financial applications built on blockchains without central
authorities or intermediaries: stablecoins, lending platforms, decentralized exchanges and asset management tools.

Core DeFi concepts:
- automated market makers (AMM)
- liquidity mining
- yield aggregation
- flash loans
- collateralized debt positions

DeFi developers need a deep understanding of financial products, security audits, oracle integration, liquidity
management and risk control. Expert DeFi developers also design incentive mechanisms, efficient trade execution
and complex financial models.
""",
    },
    {
        "title": "NFT standards and implementation",
        "content": """
Non-fungible tokens (NFTs) are unique on-chain digital assets representing art, collectibles, virtual land and
more. The main NFT standards are Ethereum's ERC-721 and ERC-1155.

NFT development essentials:
- metadata design and storage
- minting mechanics
- royalty implementation
- marketplace integration
- media rendering

NFT developers write token contracts, process metadata, store media on IPFS or Arweave and handle authentication.
Senior NFT developers also know cross-chain NFTs, dynamic NFTs, fractionalized NFTs and large-scale minting
optimization.
""",
    },
    {
        "title": "DAO governance and implementation",
        "content": """
A decentralized autonomous organization (DAO) is an entity run by rules executed as code; members usually hold
governance tokens to take part in decisions. DAOs are used for investment, community management and protocol
governance.

DAO building blocks:
- voting systems
- proposal mechanisms
- token distribution
- treasury management
- dispute resolution

DAO developers work with governance contracts, voting mechanisms, distributed decision making, crypto-economics
and community incentives. Expert DAO developers also understand quadratic voting, delegated democracy,
reputation systems and off-chain governance coordination.
""",
    },
]


def build_web3_knowledge_base() -> KnowledgeBase:
    """Fresh copy of the curated knowledge base (no id, no embeddings yet)."""
    return KnowledgeBase(
        name=KNOWLEDGE_BASE_NAME,
        description=KNOWLEDGE_BASE_DESCRIPTION,
        version="1.0.0",
        skills=[Skill(**s) for s in _SKILLS],
        resources=[Resource(**r) for r in _RESOURCES],
    )
